"""VPC network, NAT and ingress addresses for a GKE cluster."""

import pulumi
import pulumi_gcp as gcp

from .. import outputs
from ..outputs import StackExports
from .locals import Locals
from .project import Projects

# ports of the admission webhooks (cert-manager, istio) called by the control plane
WEBHOOK_PORTS = ["8443", "15017"]


class Network(pulumi.ComponentResource):
    def __init__(
        self,
        name: str,
        cluster_locals: Locals,
        projects: Projects,
        exports: StackExports,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__("kube-cluster:gcp:Network", name, None, opts)

        config = cluster_locals.config
        plan = cluster_locals.network
        project_id = projects.network_project_id
        # compute resources wait for the compute api of their project
        child_opts = pulumi.ResourceOptions(parent=self, depends_on=projects.services)

        self.network = gcp.compute.Network(
            f"{name}-vpc",
            name=config.id,
            project=project_id,
            auto_create_subnetworks=False,
            opts=child_opts,
        )
        exports.export(outputs.NETWORK_SELF_LINK, self.network.self_link)

        self.subnetwork = gcp.compute.Subnetwork(
            f"{name}-subnetwork",
            name=config.id,
            project=project_id,
            region=config.region,
            network=self.network.id,
            ip_cidr_range=plan.nodes,
            private_ip_google_access=True,
            secondary_ip_ranges=[
                gcp.compute.SubnetworkSecondaryIpRangeArgs(
                    range_name=cluster_locals.pod_secondary_range_name,
                    ip_cidr_range=plan.pods,
                ),
                gcp.compute.SubnetworkSecondaryIpRangeArgs(
                    range_name=cluster_locals.service_secondary_range_name,
                    ip_cidr_range=plan.services,
                ),
            ],
            opts=child_opts,
        )
        exports.export(outputs.SUB_NETWORK_SELF_LINK, self.subnetwork.self_link)

        self.webhook_firewall = gcp.compute.Firewall(
            f"{name}-gke-webhook",
            name=f"{config.id}-gke-webhook",
            project=project_id,
            network=self.network.name,
            source_ranges=[plan.master],
            allows=[gcp.compute.FirewallAllowArgs(protocol="tcp", ports=WEBHOOK_PORTS)],
            target_tags=[cluster_locals.network_tag],
            opts=child_opts,
        )
        exports.export(
            outputs.GKE_WEBHOOKS_FIREWALL_SELF_LINK, self.webhook_firewall.self_link
        )

        self.router = gcp.compute.Router(
            f"{name}-router",
            name=config.id,
            project=project_id,
            region=config.region,
            network=self.network.self_link,
            opts=child_opts,
        )
        exports.export(outputs.ROUTER_SELF_LINK, self.router.self_link)

        self.nat_address = gcp.compute.Address(
            f"{name}-router-nat-ip",
            name=f"{config.id}-router-nat",
            project=project_id,
            region=config.region,
            address_type="EXTERNAL",
            labels=cluster_locals.gcp_labels,
            opts=child_opts,
        )
        exports.export(outputs.NAT_IP_ADDRESS, self.nat_address.address)

        self.nat = gcp.compute.RouterNat(
            f"{name}-router-nat",
            name=config.id,
            project=project_id,
            region=config.region,
            router=self.router.name,
            nat_ip_allocate_option="MANUAL_ONLY",
            nat_ips=[self.nat_address.self_link],
            source_subnetwork_ip_ranges_to_nat="ALL_SUBNETWORKS_ALL_IP_RANGES",
            opts=child_opts,
        )
        exports.export(outputs.ROUTER_NAT_NAME, self.nat.name)

        self.register_outputs(
            {
                "network_self_link": self.network.self_link,
                "subnetwork_self_link": self.subnetwork.self_link,
                "nat_ip_address": self.nat_address.address,
            }
        )

    @property
    def network_self_link(self) -> pulumi.Output[str]:
        return self.network.self_link

    @property
    def subnetwork_self_link(self) -> pulumi.Output[str]:
        return self.subnetwork.self_link


class IngressAddresses(pulumi.ComponentResource):
    """Static IPs for the external and internal istio gateways."""

    def __init__(
        self,
        name: str,
        cluster_locals: Locals,
        projects: Projects,
        network: Network,
        exports: StackExports,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__("kube-cluster:gcp:IngressAddresses", name, None, opts)

        config = cluster_locals.config
        child_opts = pulumi.ResourceOptions(parent=self, depends_on=projects.services)

        # external load balancers live in the cluster project
        self.external = gcp.compute.Address(
            f"{name}-external",
            name=f"{config.id}-ingress-external",
            project=projects.cluster_project_id,
            region=config.region,
            address_type="EXTERNAL",
            labels=cluster_locals.gcp_labels,
            opts=child_opts,
        )
        exports.export(outputs.INGRESS_EXTERNAL_IP, self.external.address)

        self.internal = gcp.compute.Address(
            f"{name}-internal",
            name=f"{config.id}-ingress-internal",
            project=projects.network_project_id,
            region=config.region,
            address_type="INTERNAL",
            subnetwork=network.subnetwork_self_link,
            labels=cluster_locals.gcp_labels,
            opts=child_opts,
        )
        exports.export(outputs.INGRESS_INTERNAL_IP, self.internal.address)

        self.register_outputs(
            {
                "external_ip": self.external.address,
                "internal_ip": self.internal.address,
            }
        )
