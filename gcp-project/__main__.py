"""GKE cluster with add-ons, configured from the stack config."""

import pulumi
from config import GCPConfig
from pulumi_kube_cluster import GcpKubeCluster

stack_config = pulumi.Config()
config = GCPConfig.from_pulumi()

cluster = GcpKubeCluster(
    config.name,
    config,
    credentials=stack_config.get_secret("google-credentials"),
)

pulumi.export(
    "get_credentials_command",
    pulumi.Output.all(cluster.gke.cluster.name, cluster.projects.cluster_project_id).apply(
        lambda args: f"gcloud container clusters get-credentials {args[0]} --zone {config.zone} --project {args[1]}"
    ),
)
