"""Typed readers over the outputs of a finished stack."""

from typing import Any, Literal, Mapping

from pulumi import automation as auto
from pydantic import BaseModel, ConfigDict, Field

from . import outputs

StackOperation = Literal["apply", "preview", "refresh", "destroy"]


class _StackOutputs(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @classmethod
    def from_stack_output(
        cls,
        stack_output: Mapping[str, Any] | None,
        operation: StackOperation = "apply",
    ):
        """Map output keys onto fields.

        Only an apply leaves outputs worth reading, every other operation
        yields an empty model, as does a stack without outputs.
        """
        if operation != "apply" or not stack_output:
            return cls()
        aliases = {field.alias for field in cls.model_fields.values()}
        known = {
            key: str(value)
            for key, value in stack_output.items()
            if key in aliases and value is not None
        }
        return cls.model_validate(known)


class GcpStackOutputs(_StackOutputs):
    folder_id: str = Field(default="", alias=outputs.FOLDER_ID)
    folder_name: str = Field(default="", alias=outputs.FOLDER_NAME)
    folder_parent: str = Field(default="", alias=outputs.FOLDER_PARENT)
    container_cluster_project_id: str = Field(
        default="", alias=outputs.CONTAINER_CLUSTER_PROJECT_ID
    )
    container_cluster_project_number: str = Field(
        default="", alias=outputs.CONTAINER_CLUSTER_PROJECT_NUMBER
    )
    vpc_network_project_id: str = Field(default="", alias=outputs.VPC_NETWORK_PROJECT_ID)
    vpc_network_project_number: str = Field(
        default="", alias=outputs.VPC_NETWORK_PROJECT_NUMBER
    )
    network_self_link: str = Field(default="", alias=outputs.NETWORK_SELF_LINK)
    sub_network_self_link: str = Field(default="", alias=outputs.SUB_NETWORK_SELF_LINK)
    gke_webhooks_firewall_self_link: str = Field(
        default="", alias=outputs.GKE_WEBHOOKS_FIREWALL_SELF_LINK
    )
    router_self_link: str = Field(default="", alias=outputs.ROUTER_SELF_LINK)
    router_nat_name: str = Field(default="", alias=outputs.ROUTER_NAT_NAME)
    nat_ip_address: str = Field(default="", alias=outputs.NAT_IP_ADDRESS)
    ingress_external_ip: str = Field(default="", alias=outputs.INGRESS_EXTERNAL_IP)
    ingress_internal_ip: str = Field(default="", alias=outputs.INGRESS_INTERNAL_IP)
    cluster_endpoint: str = Field(default="", alias=outputs.CLUSTER_ENDPOINT)
    cluster_ca_data: str = Field(default="", alias=outputs.CLUSTER_CA_DATA)
    cert_manager_gsa_email: str = Field(default="", alias=outputs.CERT_MANAGER_GSA_EMAIL)
    external_secrets_gsa_email: str = Field(
        default="", alias=outputs.EXTERNAL_SECRETS_GSA_EMAIL
    )
    external_dns_gsa_email: str = Field(default="", alias=outputs.EXTERNAL_DNS_GSA_EMAIL)
    workload_deployer_gsa_email: str = Field(
        default="", alias=outputs.WORKLOAD_DEPLOYER_GSA_EMAIL
    )
    workload_deployer_gsa_key: str = Field(
        default="", alias=outputs.WORKLOAD_DEPLOYER_GSA_KEY
    )


class AwsStackOutputs(_StackOutputs):
    cluster_vpc_id: str = Field(default="", alias=outputs.CLUSTER_VPC_ID)
    cluster_endpoint: str = Field(default="", alias=outputs.CLUSTER_ENDPOINT)
    cluster_ca_data: str = Field(default="", alias=outputs.CLUSTER_CA_DATA)


def read_stack_outputs(stack_name: str, work_dir: str) -> dict[str, Any]:
    """Fetch the raw output map of an existing stack."""
    stack = auto.select_stack(stack_name=stack_name, work_dir=work_dir)
    return {key: output.value for key, output in stack.outputs().items()}
