"""GCP-specific configuration for kube-cluster infrastructure."""

import pulumi
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .addons import AddonsConfig
from .base import BaseConfig, NodePoolConfig


class ClusterAutoscalingConfig(BaseModel):
    model_config = ConfigDict(
        alias_generator=lambda field: field.replace("_", "-"),
        populate_by_name=True,
        extra="forbid",
    )

    is_enabled: bool = False
    cpu_min_cores: int = 0
    cpu_max_cores: int = 0
    memory_min_gb: int = 0
    memory_max_gb: int = 0

    @model_validator(mode="after")
    def _check_bounds(self) -> "ClusterAutoscalingConfig":
        if not self.is_enabled:
            return self
        if self.cpu_max_cores <= 0 or self.memory_max_gb <= 0:
            raise ValueError("cluster autoscaling needs positive cpu and memory maximums")
        if self.cpu_min_cores > self.cpu_max_cores:
            raise ValueError("cpu_min_cores is larger than cpu_max_cores")
        if self.memory_min_gb > self.memory_max_gb:
            raise ValueError("memory_min_gb is larger than memory_max_gb")
        return self


class GCPConfig(BaseConfig):
    cloud: str = "gcp"
    zone: str
    billing_account_id: str
    # "organizations/<id>" or "folders/<id>"
    folder_parent: str
    project_prefix: str = "kc"

    is_create_shared_vpc: bool = False
    is_workload_logs_enabled: bool = False
    cluster_autoscaling: ClusterAutoscalingConfig = Field(
        default_factory=ClusterAutoscalingConfig
    )

    custom_labels: dict[str, str] = Field(default_factory=dict)

    def labels(self, **extra: str) -> dict[str, str]:
        base_labels = {
            "managed-by": "pulumi",
            "kube-cluster-name": self.name,
            "kube-cluster-id": self.id,
        }
        return {**base_labels, **self.custom_labels, **extra}

    @classmethod
    def from_pulumi(cls) -> "GCPConfig":
        """Load the cluster definition from the current stack's config."""
        config = pulumi.Config()
        gcp_config = pulumi.Config("gcp")

        node_pools = config.get_object("node-pools")
        kwargs = {}
        if node_pools:
            kwargs["node_pools"] = [NodePoolConfig(**np) for np in node_pools]

        return cls(
            name=config.require("name"),
            id=config.require("id"),
            region=config.get("region") or gcp_config.require("region"),
            zone=config.get("zone") or gcp_config.require("zone"),
            billing_account_id=config.require("billing-account-id"),
            folder_parent=config.require("folder-parent"),
            is_create_shared_vpc=config.get_bool("create-shared-vpc") or False,
            is_workload_logs_enabled=config.get_bool("workload-logs-enabled") or False,
            cluster_autoscaling=ClusterAutoscalingConfig(
                **(config.get_object("cluster-autoscaling") or {})
            ),
            addons=AddonsConfig(**(config.get_object("addons") or {})),
            custom_labels=config.get_object("labels") or {},
            **kwargs,
        )
