"""IAM that lets a service project run GKE on a host project's network."""

import pulumi
import pulumi_gcp as gcp

from .network import Network
from .project import Projects

NETWORK_ADMIN_ROLE_ID = "network.admin"
NETWORK_ADMIN_PERMISSIONS = [
    "compute.firewalls.create",
    "compute.firewalls.delete",
    "compute.firewalls.get",
    "compute.firewalls.list",
    "compute.firewalls.update",
    "compute.networks.updatePolicy",
]


def cloud_services_member(project_number: str) -> str:
    return f"serviceAccount:{project_number}@cloudservices.gserviceaccount.com"


def container_engine_robot_member(project_number: str) -> str:
    return (
        f"serviceAccount:service-{project_number}"
        "@container-engine-robot.iam.gserviceaccount.com"
    )


class SharedVpcIam(pulumi.ComponentResource):
    """
    Grants the cluster project's Google agents access to the host network.

    The GKE agent needs to use the subnetwork, act as host service agent and
    manage firewall rules for load balancers in the host project.
    """

    def __init__(
        self,
        name: str,
        projects: Projects,
        network: Network,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__("kube-cluster:gcp:SharedVpcIam", name, None, opts)

        network_project_id = projects.network_project_id
        cluster_number = projects.cluster_project.number
        child_opts = pulumi.ResourceOptions(parent=self)

        self.network_admin_role = gcp.projects.IAMCustomRole(
            f"{name}-network-admin-role",
            project=network_project_id,
            role_id=NETWORK_ADMIN_ROLE_ID,
            title="Host Project Network and Security Admin",
            permissions=NETWORK_ADMIN_PERMISSIONS,
            opts=child_opts,
        )

        self.cloud_services_network_user = gcp.compute.SubnetworkIAMMember(
            f"{name}-cloudservices-network-user",
            project=network_project_id,
            region=network.subnetwork.region,
            subnetwork=network.subnetwork.name,
            role="roles/compute.networkUser",
            member=cluster_number.apply(cloud_services_member),
            opts=child_opts,
        )

        self.container_robot_network_user = gcp.compute.SubnetworkIAMMember(
            f"{name}-container-robot-network-user",
            project=network_project_id,
            region=network.subnetwork.region,
            subnetwork=network.subnetwork.name,
            role="roles/compute.networkUser",
            member=cluster_number.apply(container_engine_robot_member),
            opts=child_opts,
        )

        self.host_service_agent_user = gcp.projects.IAMMember(
            f"{name}-host-service-agent-user",
            project=network_project_id,
            role="roles/container.hostServiceAgentUser",
            member=cluster_number.apply(container_engine_robot_member),
            opts=child_opts,
        )

        self.network_admin_binding = gcp.projects.IAMBinding(
            f"{name}-network-admin-binding",
            project=network_project_id,
            role=pulumi.Output.concat(
                "projects/", network_project_id, "/roles/", NETWORK_ADMIN_ROLE_ID
            ),
            members=[cluster_number.apply(container_engine_robot_member)],
            opts=pulumi.ResourceOptions(
                parent=self, depends_on=[self.network_admin_role]
            ),
        )

        self.register_outputs({})

    @property
    def bindings(self) -> list[pulumi.Resource]:
        return [
            self.network_admin_role,
            self.cloud_services_network_user,
            self.container_robot_network_user,
            self.host_service_agent_user,
            self.network_admin_binding,
        ]
