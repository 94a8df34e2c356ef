"""AwsKubeCluster - main component for EKS clusters."""

import pulumi
import pulumi_aws as aws

from config.aws import AWSConfig

from .. import outputs
from ..addons import Addons, AwsWorkloadIdentity, CloudAddonSettings
from ..errors import wrap
from ..outputs import StackExports
from .eks import EKS
from .vpc import VPC

SECRET_STORE_NAME = "aws-secrets-manager"


def addon_settings(name: str, config: AWSConfig, eks_cluster: EKS) -> CloudAddonSettings:
    return CloudAddonSettings(
        cloud="aws",
        identity=AwsWorkloadIdentity(
            name,
            eks_cluster.oidc_provider_arn,
            eks_cluster.oidc_provider_url,
            tags=config.tags(),
        ),
        secret_store_name=SECRET_STORE_NAME,
        secret_store_provider={
            "aws": {"service": "SecretsManager", "region": config.region}
        },
        dns01_solver={"route53": {"region": config.region}},
        external_dns_values={
            "provider": {"name": "aws"},
            "env": [{"name": "AWS_DEFAULT_REGION", "value": config.region}],
        },
        internal_lb_annotations={
            "service.beta.kubernetes.io/aws-load-balancer-scheme": "internal"
        },
    )


class AwsKubeCluster(pulumi.ComponentResource):
    """EKS cluster in a dedicated VPC, with add-ons."""

    def __init__(
        self,
        name: str,
        config: AWSConfig,
        access_key_id: pulumi.Input[str] | None = None,
        secret_access_key: pulumi.Input[str] | None = None,
        exports: StackExports | None = None,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__("kube-cluster:aws:KubeCluster", name, None, opts)

        self.config = config
        self.exports = exports or StackExports()

        providers = []
        if access_key_id is not None and secret_access_key is not None:
            with wrap("failed to setup aws provider"):
                providers.append(
                    aws.Provider(
                        f"{name}-aws-provider",
                        region=config.region,
                        access_key=access_key_id,
                        secret_key=secret_access_key,
                        opts=pulumi.ResourceOptions(parent=self),
                    )
                )
        child_opts = pulumi.ResourceOptions(parent=self, providers=providers)

        with wrap("failed to add vpc"):
            self.vpc = VPC(f"{name}-vpc", config, opts=child_opts)
        self.exports.export(outputs.CLUSTER_VPC_ID, self.vpc.vpc_id)

        with wrap("failed to add eks cluster"):
            self.eks = EKS(f"{name}-eks", config, self.vpc, opts=child_opts)
        self.exports.export(outputs.CLUSTER_ENDPOINT, self.eks.endpoint)
        self.exports.export(outputs.CLUSTER_CA_DATA, self.eks.ca_data)
        self.exports.export(
            outputs.CLUSTER_KUBECONFIG, pulumi.Output.secret(self.eks.kubeconfig)
        )

        with wrap("failed to add addons"):
            self.addons = Addons(
                f"{name}-addons",
                cluster_name=config.name,
                config=config.addons,
                cloud=addon_settings(name, config, self.eks),
                k8s_provider=self.eks.provider,
                kubernetes_labels=config.kubernetes_labels(),
                exports=self.exports,
                depends_on=list(self.eks.node_groups),
                opts=child_opts,
            )

        self.register_outputs(
            {
                "vpc_id": self.vpc.vpc_id,
                "cluster_endpoint": self.eks.endpoint,
            }
        )
