"""GKE cluster, node pools and the Kubernetes provider that talks to it."""

import pulumi
import pulumi_gcp as gcp
import pulumi_random as random
import yaml

from config.base import NodePoolConfig
from config.gcp import ClusterAutoscalingConfig

from .. import outputs
from ..errors import wrap
from ..outputs import StackExports
from .locals import Locals
from .network import Network
from .project import Projects

RELEASE_CHANNEL = "STABLE"
AUTOSCALING_PROFILE = "OPTIMIZE_UTILIZATION"

NODE_OAUTH_SCOPES = [
    "https://www.googleapis.com/auth/monitoring",
    "https://www.googleapis.com/auth/monitoring.write",
    "https://www.googleapis.com/auth/devstorage.read_only",
    "https://www.googleapis.com/auth/logging.write",
]


def render_kubeconfig(
    cluster_name: str, endpoint: str, ca_data: str, token: str | None = None
) -> str:
    """
    Kubeconfig for the cluster.

    Without a token the user authenticates through gke-gcloud-auth-plugin,
    which is what operators get. With a token (an OAuth access token of a
    service account) the kubeconfig is self-contained.
    """
    if token is not None:
        user = {"token": token}
    else:
        user = {
            "exec": {
                "apiVersion": "client.authentication.k8s.io/v1beta1",
                "command": "gke-gcloud-auth-plugin",
                "installHint": "Install gke-gcloud-auth-plugin for use with kubectl",
                "provideClusterInfo": True,
            }
        }
    return yaml.safe_dump(
        {
            "apiVersion": "v1",
            "kind": "Config",
            "clusters": [
                {
                    "name": cluster_name,
                    "cluster": {
                        "certificate-authority-data": ca_data,
                        "server": f"https://{endpoint}",
                    },
                }
            ],
            "contexts": [
                {
                    "name": cluster_name,
                    "context": {"cluster": cluster_name, "user": cluster_name},
                }
            ],
            "current-context": cluster_name,
            "preferences": {},
            "users": [{"name": cluster_name, "user": user}],
        },
        sort_keys=False,
    )


def cluster_autoscaling_args(
    autoscaling: ClusterAutoscalingConfig,
) -> gcp.container.ClusterClusterAutoscalingArgs | None:
    if not autoscaling.is_enabled:
        return None
    return gcp.container.ClusterClusterAutoscalingArgs(
        enabled=True,
        autoscaling_profile=AUTOSCALING_PROFILE,
        resource_limits=[
            gcp.container.ClusterClusterAutoscalingResourceLimitArgs(
                resource_type="cpu",
                minimum=autoscaling.cpu_min_cores,
                maximum=autoscaling.cpu_max_cores,
            ),
            gcp.container.ClusterClusterAutoscalingResourceLimitArgs(
                resource_type="memory",
                minimum=autoscaling.memory_min_gb,
                maximum=autoscaling.memory_max_gb,
            ),
        ],
    )


class GKEResult:
    def __init__(
        self,
        cluster: gcp.container.Cluster,
        node_pools: list[gcp.container.NodePool],
        kubeconfig: pulumi.Output[str],
    ):
        self.cluster = cluster
        self.node_pools = node_pools
        self.kubeconfig = kubeconfig


class GKE(pulumi.ComponentResource):
    def __init__(
        self,
        name: str,
        cluster_locals: Locals,
        projects: Projects,
        network: Network,
        exports: StackExports,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__("kube-cluster:gcp:GKE", name, None, opts)

        config = cluster_locals.config
        plan = cluster_locals.network
        project_id = projects.cluster_project_id

        suffix = random.RandomString(
            f"{name}-cluster-suffix",
            length=2,
            special=False,
            upper=False,
            lower=True,
            numeric=True,
            opts=pulumi.ResourceOptions(parent=self),
        )

        cluster = gcp.container.Cluster(
            f"{name}-cluster",
            name=pulumi.Output.concat(config.name, "-", suffix.result),
            project=project_id,
            location=config.zone,
            network=network.network_self_link,
            subnetwork=network.subnetwork_self_link,
            initial_node_count=1,
            remove_default_node_pool=True,
            deletion_protection=False,
            workload_identity_config=gcp.container.ClusterWorkloadIdentityConfigArgs(
                workload_pool=pulumi.Output.concat(project_id, ".svc.id.goog"),
            ),
            release_channel=gcp.container.ClusterReleaseChannelArgs(
                channel=RELEASE_CHANNEL
            ),
            vertical_pod_autoscaling=gcp.container.ClusterVerticalPodAutoscalingArgs(
                enabled=True
            ),
            addons_config=gcp.container.ClusterAddonsConfigArgs(
                horizontal_pod_autoscaling=gcp.container.ClusterAddonsConfigHorizontalPodAutoscalingArgs(
                    disabled=False
                ),
                http_load_balancing=gcp.container.ClusterAddonsConfigHttpLoadBalancingArgs(
                    disabled=True
                ),
                network_policy_config=gcp.container.ClusterAddonsConfigNetworkPolicyConfigArgs(
                    disabled=True
                ),
            ),
            private_cluster_config=gcp.container.ClusterPrivateClusterConfigArgs(
                enable_private_nodes=True,
                enable_private_endpoint=False,
                master_ipv4_cidr_block=plan.master,
            ),
            master_authorized_networks_config=gcp.container.ClusterMasterAuthorizedNetworksConfigArgs(
                cidr_blocks=[
                    gcp.container.ClusterMasterAuthorizedNetworksConfigCidrBlockArgs(
                        cidr_block="0.0.0.0/0",
                        display_name="kubectl-from-anywhere",
                    )
                ]
            ),
            ip_allocation_policy=gcp.container.ClusterIpAllocationPolicyArgs(
                cluster_secondary_range_name=cluster_locals.pod_secondary_range_name,
                services_secondary_range_name=cluster_locals.service_secondary_range_name,
            ),
            cluster_autoscaling=cluster_autoscaling_args(config.cluster_autoscaling),
            logging_config=gcp.container.ClusterLoggingConfigArgs(
                enable_components=list(cluster_locals.logging_components),
            ),
            resource_labels=cluster_locals.gcp_labels,
            opts=pulumi.ResourceOptions(parent=self),
        )
        exports.export(outputs.CLUSTER_ENDPOINT, cluster.endpoint)
        exports.export(outputs.CLUSTER_CA_DATA, cluster.master_auth.cluster_ca_certificate)

        node_pools = []
        for np_config in config.node_pools:
            with wrap(f"failed to add {np_config.name} node pool"):
                node_pool = self._create_node_pool(name, cluster_locals, np_config, cluster)
            exports.export(
                outputs.node_pool_output_name(np_config.name, "name"), node_pool.name
            )
            exports.export(
                outputs.node_pool_output_name(np_config.name, "machine-type"),
                node_pool.node_config.machine_type,
            )
            exports.export(
                outputs.node_pool_output_name(np_config.name, "spot-instances"),
                node_pool.node_config.preemptible,
            )
            node_pools.append(node_pool)

        kubeconfig = pulumi.Output.all(
            cluster.name,
            cluster.endpoint,
            cluster.master_auth.cluster_ca_certificate,
        ).apply(lambda args: render_kubeconfig(args[0], args[1], args[2]))

        self._result = GKEResult(
            cluster=cluster,
            node_pools=node_pools,
            kubeconfig=kubeconfig,
        )

        self.register_outputs(
            {
                "cluster_name": cluster.name,
                "cluster_endpoint": cluster.endpoint,
            }
        )

    def _create_node_pool(
        self,
        name: str,
        cluster_locals: Locals,
        np_config: NodePoolConfig,
        cluster: gcp.container.Cluster,
    ) -> gcp.container.NodePool:
        labels = {**cluster_locals.kubernetes_labels, **np_config.labels}
        labels["nodepool_name"] = np_config.name

        return gcp.container.NodePool(
            f"{name}-np-{np_config.name}",
            name=np_config.name,
            project=cluster.project,
            location=cluster.location,
            cluster=cluster.name,
            node_count=np_config.min_size,
            autoscaling=gcp.container.NodePoolAutoscalingArgs(
                min_node_count=np_config.min_size,
                max_node_count=np_config.max_size,
            ),
            management=gcp.container.NodePoolManagementArgs(
                auto_repair=True,
                auto_upgrade=True,
            ),
            node_config=gcp.container.NodePoolNodeConfigArgs(
                machine_type=np_config.machine_type,
                disk_size_gb=np_config.disk_size_gb,
                preemptible=np_config.is_spot_enabled,
                labels=labels,
                metadata={"disable-legacy-endpoints": "true"},
                oauth_scopes=NODE_OAUTH_SCOPES,
                tags=[cluster_locals.network_tag],
                workload_metadata_config=gcp.container.NodePoolNodeConfigWorkloadMetadataConfigArgs(
                    mode="GKE_METADATA"
                ),
                resource_labels=cluster_locals.gcp_labels,
            ),
            upgrade_settings=gcp.container.NodePoolUpgradeSettingsArgs(
                max_surge=2,
                max_unavailable=1,
            ),
            opts=pulumi.ResourceOptions(
                parent=self,
                ignore_changes=["nodeCount"],
                delete_before_replace=True,
            ),
        )

    @property
    def cluster(self) -> gcp.container.Cluster:
        return self._result.cluster

    @property
    def node_pools(self) -> list[gcp.container.NodePool]:
        return self._result.node_pools

    @property
    def kubeconfig(self) -> pulumi.Output[str]:
        return self._result.kubeconfig
