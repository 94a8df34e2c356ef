"""
AWS components for EKS clusters.
"""

from .cluster import AwsKubeCluster
from .eks import EKS
from .vpc import VPC

__all__ = ["AwsKubeCluster", "EKS", "VPC"]
