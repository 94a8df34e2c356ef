"""
GCP components for GKE clusters.
"""

from .cluster import GcpKubeCluster
from .gke import GKE
from .iam import Iam
from .network import IngressAddresses, Network
from .project import Projects
from .shared_vpc_iam import SharedVpcIam

__all__ = [
    "GcpKubeCluster",
    "GKE",
    "Iam",
    "IngressAddresses",
    "Network",
    "Projects",
    "SharedVpcIam",
]
