"""Values derived once per run from the cluster config."""

import ipaddress
from dataclasses import dataclass

from config.gcp import GCPConfig

SUB_NETWORK_CIDR = "10.0.0.0/14"
API_SERVER_IP_CIDR = "172.16.0.0/28"

POD_SECONDARY_RANGE_SUFFIX = "pods"
SERVICE_SECONDARY_RANGE_SUFFIX = "services"


@dataclass(frozen=True)
class NetworkPlan:
    """Split of the cluster address block into pod, service and node ranges."""

    block: str
    pods: str
    services: str
    nodes: str
    master: str

    @classmethod
    def from_block(
        cls, block: str = SUB_NETWORK_CIDR, master: str = API_SERVER_IP_CIDR
    ) -> "NetworkPlan":
        # half the block for pods, a quarter each for services and nodes
        network = ipaddress.ip_network(block)
        pods, rest = network.subnets(prefixlen_diff=1)
        services, nodes = rest.subnets(prefixlen_diff=1)
        plan = cls(
            block=str(network),
            pods=str(pods),
            services=str(services),
            nodes=str(nodes),
            master=master,
        )
        plan.validate()
        return plan

    def validate(self) -> None:
        block = ipaddress.ip_network(self.block)
        ranges = {
            "pods": ipaddress.ip_network(self.pods),
            "services": ipaddress.ip_network(self.services),
            "nodes": ipaddress.ip_network(self.nodes),
        }
        for label, net in ranges.items():
            if not net.subnet_of(block):
                raise ValueError(f"{label} range {net} is outside of {block}")
        names = list(ranges)
        for i, first in enumerate(names):
            for second in names[i + 1 :]:
                if ranges[first].overlaps(ranges[second]):
                    raise ValueError(
                        f"{first} range {ranges[first]} overlaps "
                        f"{second} range {ranges[second]}"
                    )
        master = ipaddress.ip_network(self.master)
        if master.prefixlen != 28:
            raise ValueError(f"GKE control plane range {master} must be a /28")
        if master.overlaps(block):
            raise ValueError(f"GKE control plane range {master} overlaps {block}")


@dataclass(frozen=True)
class Locals:
    config: GCPConfig
    gcp_labels: dict[str, str]
    kubernetes_labels: dict[str, str]
    pod_secondary_range_name: str
    service_secondary_range_name: str
    network_tag: str
    logging_components: tuple[str, ...]
    network: NetworkPlan


def initialize(config: GCPConfig) -> Locals:
    logging_components = ["SYSTEM_COMPONENTS"]
    if config.is_workload_logs_enabled:
        logging_components.append("WORKLOADS")

    return Locals(
        config=config,
        gcp_labels=config.labels(),
        kubernetes_labels=config.kubernetes_labels(),
        pod_secondary_range_name=f"{config.id}-{POD_SECONDARY_RANGE_SUFFIX}",
        service_secondary_range_name=f"{config.id}-{SERVICE_SECONDARY_RANGE_SUFFIX}",
        network_tag=config.id,
        logging_components=tuple(logging_components),
        network=NetworkPlan.from_block(),
    )
