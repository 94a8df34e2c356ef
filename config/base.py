"""
Base configuration for kube-cluster infrastructure (cloud-agnostic).
"""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .addons import AddonsConfig

_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9-]*$")


class NodePoolConfig(BaseModel):
    model_config = ConfigDict(
        alias_generator=lambda field: field.replace("_", "-"),
        populate_by_name=True,
        extra="forbid",
    )

    name: str
    # AWS
    instance_type: str = "t3.large"
    desired_size: int = 1
    disk_size_gb: int = 100
    # GCP
    machine_type: str = "e2-standard-4"
    is_spot_enabled: bool = False
    # Common
    min_size: int = 1
    max_size: int = 3
    labels: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_sizes(self) -> "NodePoolConfig":
        if self.max_size < self.min_size:
            raise ValueError(
                f"max_size {self.max_size} is smaller than min_size {self.min_size}"
            )
        if not self.min_size <= self.desired_size <= self.max_size:
            raise ValueError(
                f"desired_size {self.desired_size} is outside "
                f"[{self.min_size}, {self.max_size}]"
            )
        return self


class BaseConfig(BaseModel):
    """
    Base configuration for a kube cluster (cloud-agnostic).

    `name` is the human readable cluster name and is embedded in project and
    cluster names, `id` is the unique identifier used to name network
    resources.
    """

    name: str
    id: str
    region: str
    cloud: str = "gcp"

    node_pools: list[NodePoolConfig] = Field(
        default_factory=lambda: [NodePoolConfig(name="default")]
    )
    addons: AddonsConfig = Field(default_factory=AddonsConfig)

    # Kubernetes labels applied to every namespace created for add-ons
    custom_kubernetes_labels: dict[str, str] = Field(default_factory=dict)

    @field_validator("name", "id")
    @classmethod
    def _dns_label(cls, value: str) -> str:
        if not _NAME_PATTERN.match(value):
            raise ValueError(
                f"{value!r} must start with a lowercase letter and contain only "
                "lowercase letters, digits and hyphens"
            )
        if len(value) > 20:
            raise ValueError(f"{value!r} is longer than 20 characters")
        return value

    def kubernetes_labels(self, **extra: str) -> dict[str, str]:
        base_labels = {
            "app.kubernetes.io/managed-by": "pulumi",
            "kube-cluster/name": self.name,
            "kube-cluster/id": self.id,
        }
        return {**base_labels, **self.custom_kubernetes_labels, **extra}
