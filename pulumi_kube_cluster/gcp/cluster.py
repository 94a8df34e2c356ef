"""GcpKubeCluster - main component for GKE clusters."""

import pulumi
import pulumi_gcp as gcp

from config.gcp import GCPConfig

from ..addons import Addons, CloudAddonSettings, GcpWorkloadIdentity
from ..errors import wrap
from ..outputs import StackExports
from .gke import GKE
from .iam import Iam
from .locals import initialize
from .network import IngressAddresses, Network
from .project import Projects
from .shared_vpc_iam import SharedVpcIam

SECRET_STORE_NAME = "gcp-secrets-manager"


def addon_settings(
    name: str,
    project_id: pulumi.Output[str],
    ingress: IngressAddresses | None = None,
) -> CloudAddonSettings:
    return CloudAddonSettings(
        cloud="gcp",
        identity=GcpWorkloadIdentity(name, project_id),
        secret_store_name=SECRET_STORE_NAME,
        secret_store_provider={"gcpsm": {"projectID": project_id}},
        dns01_solver={"cloudDNS": {"project": project_id}},
        external_dns_values={
            "provider": {"name": "google"},
            "extraArgs": [pulumi.Output.concat("--google-project=", project_id)],
        },
        internal_lb_annotations={"networking.gke.io/load-balancer-type": "Internal"},
        ingress_external_ip=ingress.external.address if ingress else None,
        ingress_internal_ip=ingress.internal.address if ingress else None,
    )


class GcpKubeCluster(pulumi.ComponentResource):
    """
    GKE cluster in its own folder and project(s), with network and add-ons.

    Layers are declared top-down: folder and projects, network, shared VPC
    IAM (only when the network lives in a separate project), cluster and
    node pools, IAM and finally add-ons. `credentials` is a service account
    key used for an explicit google provider; without it the ambient
    provider configuration is used. Add-ons are installed through a
    Kubernetes provider that authenticates as the workload deployer.
    """

    def __init__(
        self,
        name: str,
        config: GCPConfig,
        credentials: pulumi.Input[str] | None = None,
        exports: StackExports | None = None,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__("kube-cluster:gcp:KubeCluster", name, None, opts)

        self.config = config
        self.exports = exports or StackExports()
        cluster_locals = initialize(config)

        providers = []
        if credentials is not None:
            with wrap("failed to setup google provider"):
                providers.append(
                    gcp.Provider(
                        f"{name}-gcp-provider",
                        credentials=credentials,
                        opts=pulumi.ResourceOptions(parent=self),
                    )
                )
        child_opts = pulumi.ResourceOptions(parent=self, providers=providers)

        with wrap("failed to add folder and projects"):
            self.projects = Projects(
                f"{name}-projects", cluster_locals, self.exports, opts=child_opts
            )

        with wrap("failed to add network"):
            self.network = Network(
                f"{name}-network",
                cluster_locals,
                self.projects,
                self.exports,
                opts=child_opts,
            )

        self.shared_vpc_iam: SharedVpcIam | None = None
        if self.projects.is_shared_vpc:
            pulumi.log.info("cluster and network projects differ, adding shared vpc iam")
            with wrap("failed to add shared vpc iam"):
                self.shared_vpc_iam = SharedVpcIam(
                    f"{name}-shared-vpc-iam",
                    self.projects,
                    self.network,
                    opts=child_opts,
                )

        cluster_deps: list[pulumi.Resource] = [*self.projects.services, self.network]
        if self.shared_vpc_iam is not None:
            cluster_deps.extend(self.shared_vpc_iam.bindings)

        with wrap("failed to add container cluster"):
            self.gke = GKE(
                f"{name}-gke",
                cluster_locals,
                self.projects,
                self.network,
                self.exports,
                opts=pulumi.ResourceOptions.merge(
                    child_opts, pulumi.ResourceOptions(depends_on=cluster_deps)
                ),
            )

        with wrap("failed to add iam"):
            self.iam = Iam(
                f"{name}-iam",
                self.projects,
                self.gke,
                self.exports,
                opts=pulumi.ResourceOptions.merge(
                    child_opts, pulumi.ResourceOptions(depends_on=[self.gke])
                ),
            )

        ingress = None
        if config.addons.istio:
            with wrap("failed to reserve ingress addresses"):
                ingress = IngressAddresses(
                    f"{name}-ingress",
                    cluster_locals,
                    self.projects,
                    self.network,
                    self.exports,
                    opts=child_opts,
                )

        with wrap("failed to add addons"):
            self.addons = Addons(
                f"{name}-addons",
                cluster_name=config.name,
                config=config.addons,
                cloud=addon_settings(name, self.projects.cluster_project_id, ingress),
                k8s_provider=self.iam.k8s_provider,
                kubernetes_labels=cluster_locals.kubernetes_labels,
                exports=self.exports,
                depends_on=[self.gke.cluster, *self.gke.node_pools],
                opts=child_opts,
            )

        self.register_outputs(
            {
                "cluster_project_id": self.projects.cluster_project_id,
                "cluster_endpoint": self.gke.cluster.endpoint,
            }
        )

    @property
    def k8s_provider(self):
        return self.iam.k8s_provider

    @property
    def kubeconfig(self) -> pulumi.Output[str]:
        return self.gke.kubeconfig
