from .addons import AddonsConfig
from .base import BaseConfig, NodePoolConfig

# AWS config
from .aws import AWSConfig

# GCP config
from .gcp import ClusterAutoscalingConfig, GCPConfig

__all__ = [
    # Base
    "AddonsConfig",
    "BaseConfig",
    "NodePoolConfig",
    # AWS
    "AWSConfig",
    # GCP
    "ClusterAutoscalingConfig",
    "GCPConfig",
]
