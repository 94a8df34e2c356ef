"""EKS cluster with add-ons, configured from the stack config."""

import pulumi
from config import AWSConfig
from pulumi_kube_cluster import AwsKubeCluster

stack_config = pulumi.Config()
config = AWSConfig.from_pulumi()

cluster = AwsKubeCluster(
    config.name,
    config,
    access_key_id=stack_config.get_secret("aws-access-key-id"),
    secret_access_key=stack_config.get_secret("aws-secret-access-key"),
)

pulumi.export(
    "update_kubeconfig_command",
    cluster.eks.cluster_name.apply(
        lambda name: f"aws eks update-kubeconfig --region {config.region} --name {name}"
    ),
)
