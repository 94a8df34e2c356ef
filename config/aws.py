"""
Configuration for kube-cluster AWS infrastructure.
"""

import ipaddress

import pulumi
from pydantic import Field, field_validator

from .addons import AddonsConfig
from .base import BaseConfig, NodePoolConfig


class AWSConfig(BaseConfig):
    """
    AWS-specific configuration for an EKS cluster.

    Extends BaseConfig with AWS-specific settings.
    """

    cloud: str = "aws"

    # Networking
    availability_zones: list[str]
    vpc_cidr: str = "10.0.0.0/16"

    # Kubernetes
    kubernetes_version: str = "1.30"

    # Custom tags from user
    custom_tags: dict[str, str] = Field(default_factory=dict)

    @field_validator("availability_zones")
    @classmethod
    def _zone_count(cls, value: list[str]) -> list[str]:
        if not 1 <= len(value) <= 3:
            raise ValueError("between one and three availability zones are supported")
        return value

    @field_validator("vpc_cidr")
    @classmethod
    def _vpc_size(cls, value: str) -> str:
        if ipaddress.ip_network(value).prefixlen != 16:
            raise ValueError(f"VPC CIDR {value} must be a /16")
        return value

    def tags(self, **extra: str) -> dict[str, str]:
        """Generate consistent resource tags, including user-provided custom tags."""
        base_tags = {
            "kube-cluster:managed-by": "pulumi",
            "kube-cluster:name": self.name,
        }
        return {**base_tags, **self.custom_tags, **extra}

    @classmethod
    def from_pulumi(cls) -> "AWSConfig":
        config = pulumi.Config()
        aws_config = pulumi.Config("aws")

        node_pools = config.get_object("node-pools")
        kwargs = {}
        if node_pools:
            kwargs["node_pools"] = [NodePoolConfig(**np) for np in node_pools]

        return cls(
            name=config.require("name"),
            id=config.require("id"),
            region=config.get("region") or aws_config.require("region"),
            availability_zones=config.require_object("availability-zones"),
            vpc_cidr=config.get("vpc-cidr") or "10.0.0.0/16",
            kubernetes_version=config.get("kubernetes-version") or "1.30",
            addons=AddonsConfig(**(config.get_object("addons") or {})),
            custom_tags=config.get_object("tags") or {},
            **kwargs,
        )
