"""
EKS component for kube clusters on AWS.

Creates a managed EKS cluster with one managed node group per node pool.
"""

import json

import pulumi
import pulumi_aws as aws
import pulumi_eks as eks
import pulumi_kubernetes as k8s

from config.aws import AWSConfig
from config.base import NodePoolConfig

from .vpc import VPC

CLUSTER_POLICIES = [
    "arn:aws:iam::aws:policy/AmazonEKSClusterPolicy",
    "arn:aws:iam::aws:policy/AmazonEKSVPCResourceController",
]

NODE_POLICIES = [
    "arn:aws:iam::aws:policy/AmazonEKSWorkerNodePolicy",
    "arn:aws:iam::aws:policy/AmazonEKS_CNI_Policy",
    "arn:aws:iam::aws:policy/AmazonEC2ContainerRegistryReadOnly",
    "arn:aws:iam::aws:policy/AmazonSSMManagedInstanceCore",
]


def _assume_role_policy(service: str) -> str:
    return json.dumps(
        {
            "Version": "2012-10-17",
            "Statement": [
                {
                    "Effect": "Allow",
                    "Principal": {"Service": service},
                    "Action": "sts:AssumeRole",
                }
            ],
        }
    )


class EKS(pulumi.ComponentResource):
    """
    Creates an EKS cluster with:
    - Managed node groups based on configuration
    - IAM roles for cluster and nodes
    - OIDC provider for IAM Roles for Service Accounts (IRSA)
    """

    def __init__(
        self,
        name: str,
        config: AWSConfig,
        vpc: VPC,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__("kube-cluster:aws:EKS", name, None, opts)

        self.config = config
        child_opts = pulumi.ResourceOptions(parent=self)

        cluster_role = self._create_role(name, "cluster", "eks.amazonaws.com", CLUSTER_POLICIES, child_opts)
        self._node_role = self._create_role(name, "node", "ec2.amazonaws.com", NODE_POLICIES, child_opts)

        self.cluster = eks.Cluster(
            f"{name}-cluster",
            name=config.name,
            vpc_id=vpc.vpc_id,
            public_subnet_ids=vpc.public_subnet_ids,
            private_subnet_ids=vpc.private_subnet_ids,
            version=config.kubernetes_version,
            service_role=cluster_role,
            skip_default_node_group=True,
            instance_roles=[self._node_role],
            create_oidc_provider=True,
            endpoint_private_access=True,
            endpoint_public_access=True,
            tags=config.tags(),
            opts=child_opts,
        )

        self.node_groups: list[aws.eks.NodeGroup] = [
            self._create_node_group(name, np_config, vpc, child_opts)
            for np_config in config.node_pools
        ]

        self._k8s_provider = k8s.Provider(
            f"{name}-k8s-provider",
            kubeconfig=self.cluster.kubeconfig,
            opts=pulumi.ResourceOptions(parent=self, depends_on=self.node_groups),
        )

        self.register_outputs(
            {
                "cluster_name": self.cluster_name,
                "oidc_provider_arn": self.oidc_provider_arn,
            }
        )

    def _create_role(
        self,
        name: str,
        kind: str,
        service: str,
        policy_arns: list[str],
        opts: pulumi.ResourceOptions,
    ) -> aws.iam.Role:
        role = aws.iam.Role(
            f"{name}-{kind}-role",
            assume_role_policy=_assume_role_policy(service),
            tags=self.config.tags(Name=f"{self.config.id}-{kind}-role"),
            opts=opts,
        )

        for policy_arn in policy_arns:
            policy_name = policy_arn.split("/")[-1]
            aws.iam.RolePolicyAttachment(
                f"{name}-{kind}-{policy_name}",
                role=role.name,
                policy_arn=policy_arn,
                opts=opts,
            )

        return role

    def _create_node_group(
        self,
        name: str,
        np_config: NodePoolConfig,
        vpc: VPC,
        opts: pulumi.ResourceOptions,
    ) -> aws.eks.NodeGroup:
        return aws.eks.NodeGroup(
            f"{name}-ng-{np_config.name}",
            cluster_name=self.cluster.eks_cluster.name,
            node_group_name=f"{self.config.id}-{np_config.name}",
            node_role_arn=self._node_role.arn,
            subnet_ids=vpc.private_subnet_ids,
            ami_type="AL2023_x86_64_STANDARD",
            instance_types=[np_config.instance_type],
            disk_size=np_config.disk_size_gb,
            capacity_type="SPOT" if np_config.is_spot_enabled else "ON_DEMAND",
            scaling_config=aws.eks.NodeGroupScalingConfigArgs(
                desired_size=np_config.desired_size,
                min_size=np_config.min_size,
                max_size=np_config.max_size,
            ),
            labels={**self.config.kubernetes_labels(), **np_config.labels},
            tags=self.config.tags(Name=f"{self.config.id}-{np_config.name}"),
            opts=pulumi.ResourceOptions.merge(
                opts, pulumi.ResourceOptions(ignore_changes=["scalingConfig.desiredSize"])
            ),
        )

    @property
    def kubeconfig(self) -> pulumi.Output:
        return self.cluster.kubeconfig

    @property
    def provider(self) -> pulumi.ProviderResource:
        return self._k8s_provider

    @property
    def cluster_name(self) -> pulumi.Output[str]:
        return self.cluster.eks_cluster.name

    @property
    def endpoint(self) -> pulumi.Output[str]:
        return self.cluster.eks_cluster.endpoint

    @property
    def ca_data(self) -> pulumi.Output[str]:
        return self.cluster.eks_cluster.certificate_authority.data

    @property
    def oidc_provider_arn(self) -> pulumi.Output[str]:
        return self.cluster.core.oidc_provider.arn

    @property
    def oidc_provider_url(self) -> pulumi.Output[str]:
        return self.cluster.core.oidc_provider.url
