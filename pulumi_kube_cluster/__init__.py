"""
pulumi-kube-cluster - Pulumi components for GKE and EKS clusters with add-ons.
"""

__version__ = "0.1.0"

# primary exports
from .aws import AwsKubeCluster
from .gcp import GcpKubeCluster

from .addons import Addons, install_addons
from .errors import AddonError, KubeClusterError, ResourceError
from .outputs import StackExports
from .stack_outputs import AwsStackOutputs, GcpStackOutputs, read_stack_outputs

__all__ = [
    # primary
    "AwsKubeCluster",
    "GcpKubeCluster",
    # components
    "Addons",
    "install_addons",
    # outputs
    "StackExports",
    "AwsStackOutputs",
    "GcpStackOutputs",
    "read_stack_outputs",
    # errors
    "AddonError",
    "KubeClusterError",
    "ResourceError",
]
