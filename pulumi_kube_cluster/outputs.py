"""Stack output names and the exporter that publishes them."""

from typing import Any, Callable

import pulumi

# folder and projects
FOLDER_ID = "folder-id"
FOLDER_NAME = "folder-name"
FOLDER_PARENT = "folder-parent"
CONTAINER_CLUSTER_PROJECT_ID = "container-cluster-project-id"
CONTAINER_CLUSTER_PROJECT_NUMBER = "container-cluster-project-number"
VPC_NETWORK_PROJECT_ID = "vpc-network-project-id"
VPC_NETWORK_PROJECT_NUMBER = "vpc-network-project-number"

# network
NETWORK_SELF_LINK = "network-self-link"
SUB_NETWORK_SELF_LINK = "sub-network-self-link"
GKE_WEBHOOKS_FIREWALL_SELF_LINK = "gke-webhooks-firewall-self-link"
ROUTER_SELF_LINK = "router-self-link"
ROUTER_NAT_NAME = "router-nat-name"
NAT_IP_ADDRESS = "nat-ip-address"
INGRESS_EXTERNAL_IP = "ingress-external-ip"
INGRESS_INTERNAL_IP = "ingress-internal-ip"

# cluster
CLUSTER_ENDPOINT = "cluster-endpoint"
CLUSTER_CA_DATA = "cluster-ca-data"
CLUSTER_VPC_ID = "cluster-vpc-id"
CLUSTER_KUBECONFIG = "cluster-kubeconfig"

# iam
WORKLOAD_DEPLOYER_GSA_EMAIL = "workload-deployer-gsa-email"
WORKLOAD_DEPLOYER_GSA_KEY = "workload-deployer-gsa-key"

# add-on identities
GSA_EMAIL_SUFFIX = "gsa-email"
IAM_ROLE_ARN_SUFFIX = "iam-role-arn"


def identity_output_name(addon: str, suffix: str) -> str:
    """Output key of an add-on's cloud identity, e.g. "cert-manager-gsa-email"."""
    return f"{addon}-{suffix}"


CERT_MANAGER_GSA_EMAIL = identity_output_name("cert-manager", GSA_EMAIL_SUFFIX)
EXTERNAL_SECRETS_GSA_EMAIL = identity_output_name("external-secrets", GSA_EMAIL_SUFFIX)
EXTERNAL_DNS_GSA_EMAIL = identity_output_name("external-dns", GSA_EMAIL_SUFFIX)


def node_pool_output_name(pool_name: str, attribute: str) -> str:
    """Output key of a node pool attribute, e.g. "node-pool-default-machine-type"."""
    return f"node-pool-{pool_name}-{attribute}"


class StackExports:
    """
    Write-once table of stack outputs.

    Every export is recorded locally and forwarded to `pulumi.export`
    (or `export_fn` when given). Exporting the same key twice is an error.
    """

    def __init__(self, export_fn: Callable[[str, Any], None] | None = None):
        self._values: dict[str, Any] = {}
        self._export_fn = export_fn

    def export(self, key: str, value: Any) -> None:
        if key in self._values:
            raise ValueError(f"stack output {key!r} is exported more than once")
        self._values[key] = value
        (self._export_fn or pulumi.export)(key, value)

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def keys(self) -> list[str]:
        return list(self._values)

    def as_dict(self) -> dict[str, Any]:
        return dict(self._values)
