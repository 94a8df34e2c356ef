"""
Service account used by CI to deploy workloads onto the cluster.

The add-ons are installed as this account too: its key backs a dedicated
google provider whose access token ends up in the Kubernetes provider.
"""

import base64

import pulumi
import pulumi_gcp as gcp
import pulumi_kubernetes as k8s

from .. import outputs
from ..outputs import StackExports
from .gke import GKE, render_kubeconfig
from .project import Projects

WORKLOAD_DEPLOYER_ACCOUNT_ID = "workload-deployer"


class Iam(pulumi.ComponentResource):
    def __init__(
        self,
        name: str,
        projects: Projects,
        gke: GKE,
        exports: StackExports,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__("kube-cluster:gcp:Iam", name, None, opts)

        project_id = projects.cluster_project_id

        self.workload_deployer = gcp.serviceaccount.Account(
            f"{name}-workload-deployer",
            account_id=WORKLOAD_DEPLOYER_ACCOUNT_ID,
            display_name="Workload deployer",
            project=project_id,
            opts=pulumi.ResourceOptions(parent=self),
        )

        container_admin = gcp.projects.IAMMember(
            f"{name}-workload-deployer-container-admin",
            project=project_id,
            role="roles/container.admin",
            member=self.workload_deployer.email.apply(
                lambda email: f"serviceAccount:{email}"
            ),
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.workload_deployer_key = gcp.serviceaccount.Key(
            f"{name}-workload-deployer-key",
            service_account_id=self.workload_deployer.name,
            opts=pulumi.ResourceOptions(parent=self, depends_on=[self.workload_deployer]),
        )

        exports.export(outputs.WORKLOAD_DEPLOYER_GSA_EMAIL, self.workload_deployer.email)
        exports.export(
            outputs.WORKLOAD_DEPLOYER_GSA_KEY,
            pulumi.Output.secret(self.workload_deployer_key.private_key),
        )

        self.k8s_provider = self._deployer_k8s_provider(
            name, project_id, gke, container_admin
        )

        self.register_outputs({"workload_deployer_email": self.workload_deployer.email})

    def _deployer_k8s_provider(
        self,
        name: str,
        project_id: pulumi.Output[str],
        gke: GKE,
        container_admin: gcp.projects.IAMMember,
    ) -> k8s.Provider:
        # private_key is the base64 encoded credentials JSON
        credentials = self.workload_deployer_key.private_key.apply(
            lambda key: base64.b64decode(key).decode("utf-8")
        )
        deployer_gcp = gcp.Provider(
            f"{name}-workload-deployer-gcp",
            credentials=pulumi.Output.secret(credentials),
            project=project_id,
            opts=pulumi.ResourceOptions(parent=self),
        )
        client_config = gcp.organizations.get_client_config_output(
            opts=pulumi.InvokeOptions(provider=deployer_gcp)
        )

        kubeconfig = pulumi.Output.all(
            gke.cluster.name,
            gke.cluster.endpoint,
            gke.cluster.master_auth.cluster_ca_certificate,
            client_config.access_token,
        ).apply(lambda args: render_kubeconfig(args[0], args[1], args[2], token=args[3]))

        # add-ons need schedulable nodes, not only a control plane
        return k8s.Provider(
            f"{name}-k8s-provider",
            kubeconfig=pulumi.Output.secret(kubeconfig),
            opts=pulumi.ResourceOptions(
                parent=self,
                depends_on=[container_admin, gke.cluster, *gke.node_pools],
            ),
        )
