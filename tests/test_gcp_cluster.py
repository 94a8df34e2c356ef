import pulumi
import pulumi_gcp as gcp
import yaml
from pulumi.runtime.rpc import unwrap_rpc_secret

from config import AddonsConfig, NodePoolConfig
from pulumi_kube_cluster import GcpKubeCluster, outputs
from pulumi_kube_cluster.outputs import StackExports
from tests.factories import gcp_config

SHARED_VPC_RESOURCES = {
    "demo-shared-vpc-iam-network-admin-role",
    "demo-shared-vpc-iam-cloudservices-network-user",
    "demo-shared-vpc-iam-container-robot-network-user",
    "demo-shared-vpc-iam-host-service-agent-user",
    "demo-shared-vpc-iam-network-admin-binding",
}


def _declare(config, exported):
    holder = {}

    @pulumi.runtime.test
    def declare():
        holder["cluster"] = GcpKubeCluster(
            "demo", config, exports=StackExports(export_fn=exported)
        )

    declare()
    return holder["cluster"]


def test_single_project_skips_shared_vpc_iam(mocks, exported):
    cluster = _declare(gcp_config(), exported)

    assert cluster.shared_vpc_iam is None
    assert not cluster.projects.is_shared_vpc
    assert len(mocks.of_kind("Project")) == 1
    assert not SHARED_VPC_RESOURCES & mocks.names()


def test_shared_vpc_adds_network_project_and_iam(mocks, exported):
    cluster = _declare(gcp_config(is_create_shared_vpc=True), exported)

    assert cluster.shared_vpc_iam is not None
    assert len(mocks.of_kind("Project")) == 2
    assert SHARED_VPC_RESOURCES <= mocks.names()

    [role] = mocks.of_kind("IAMCustomRole")
    assert role.inputs["roleId"] == "network.admin"
    assert "compute.networks.updatePolicy" in role.inputs["permissions"]


def test_cluster_policy(mocks, exported):
    _declare(gcp_config(), exported)

    [cluster] = mocks.of_kind("Cluster")
    assert cluster.inputs["removeDefaultNodePool"] is True
    assert cluster.inputs["deletionProtection"] is False
    assert cluster.inputs["releaseChannel"] == {"channel": "STABLE"}
    assert cluster.inputs["privateClusterConfig"]["masterIpv4CidrBlock"] == "172.16.0.0/28"
    assert cluster.inputs["initialNodeCount"] == 1
    assert cluster.inputs["workloadIdentityConfig"] == {"workloadPool": "kc-demo-cx7.svc.id.goog"}
    assert cluster.inputs["addonsConfig"] == {
        "horizontalPodAutoscaling": {"disabled": False},
        "httpLoadBalancing": {"disabled": True},
        "networkPolicyConfig": {"disabled": True},
    }
    assert cluster.inputs["masterAuthorizedNetworksConfig"]["cidrBlocks"] == [
        {"cidrBlock": "0.0.0.0/0", "displayName": "kubectl-from-anywhere"}
    ]
    assert cluster.inputs["loggingConfig"]["enableComponents"] == ["SYSTEM_COMPONENTS"]

    [subnetwork] = mocks.of_kind("Subnetwork")
    assert subnetwork.inputs["ipCidrRange"] == "10.3.0.0/16"
    assert {r["rangeName"] for r in subnetwork.inputs["secondaryIpRanges"]} == {
        "demo-id-pods",
        "demo-id-services",
    }

    [firewall] = mocks.of_kind("Firewall")
    assert firewall.inputs["allows"][0]["ports"] == ["8443", "15017"]
    assert firewall.inputs["targetTags"] == ["demo-id"]


def test_node_pools_and_outputs(mocks, exported):
    config = gcp_config(
        node_pools=[
            NodePoolConfig(name="default"),
            NodePoolConfig(name="spot", is_spot_enabled=True, min_size=0, max_size=5),
        ]
    )
    _declare(config, exported)

    pools = {pool.inputs["name"]: pool for pool in mocks.of_kind("NodePool")}
    assert set(pools) == {"default", "spot"}
    assert pools["spot"].inputs["nodeConfig"]["preemptible"] is True
    assert pools["spot"].inputs["autoscaling"] == {"minNodeCount": 0, "maxNodeCount": 5}
    for pool in pools.values():
        assert pool.inputs["management"] == {"autoRepair": True, "autoUpgrade": True}
        assert pool.inputs["nodeConfig"]["workloadMetadataConfig"] == {"mode": "GKE_METADATA"}
        assert pool.inputs["upgradeSettings"] == {"maxSurge": 2, "maxUnavailable": 1}

    for key in (
        outputs.FOLDER_ID,
        outputs.CONTAINER_CLUSTER_PROJECT_ID,
        outputs.VPC_NETWORK_PROJECT_ID,
        outputs.NETWORK_SELF_LINK,
        outputs.NAT_IP_ADDRESS,
        outputs.CLUSTER_ENDPOINT,
        outputs.CLUSTER_CA_DATA,
        outputs.WORKLOAD_DEPLOYER_GSA_EMAIL,
        outputs.node_pool_output_name("spot", "machine-type"),
    ):
        assert key in exported.values
    assert outputs.INGRESS_EXTERNAL_IP not in exported.values


def test_istio_reserves_ingress_addresses(mocks, exported):
    _declare(gcp_config(addons=AddonsConfig(istio=True)), exported)

    assert outputs.INGRESS_EXTERNAL_IP in exported.values
    assert outputs.INGRESS_INTERNAL_IP in exported.values
    assert {"demo-addons-istio-base", "demo-addons-istiod"} <= mocks.names()


def test_workload_logs_reach_the_cluster(mocks, exported):
    _declare(gcp_config(is_workload_logs_enabled=True), exported)

    [cluster] = mocks.of_kind("Cluster")
    assert cluster.inputs["loggingConfig"]["enableComponents"] == [
        "SYSTEM_COMPONENTS",
        "WORKLOADS",
    ]


def test_ingress_addresses_wait_for_project_apis(mocks, exported, monkeypatch):
    address_opts = {}

    class RecordingAddress(gcp.compute.Address):
        def __init__(self, resource_name, *args, opts=None, **kwargs):
            address_opts[resource_name] = opts
            super().__init__(resource_name, *args, opts=opts, **kwargs)

    monkeypatch.setattr(gcp.compute, "Address", RecordingAddress)
    cluster = _declare(gcp_config(addons=AddonsConfig(istio=True)), exported)

    services = cluster.projects.services
    assert services
    for name in ("demo-ingress-external", "demo-ingress-internal", "demo-network-router-nat-ip"):
        depends_on = address_opts[name].depends_on
        assert all(service in depends_on for service in services)


def test_addons_deploy_as_workload_deployer(mocks, exported):
    _declare(gcp_config(), exported)

    [deployer_gcp] = [r for r in mocks.resources if r.typ == "pulumi:providers:gcp"]
    assert unwrap_rpc_secret(deployer_gcp.inputs["credentials"]) == "secret"

    [provider] = [r for r in mocks.resources if r.name == "demo-iam-k8s-provider"]
    kubeconfig = yaml.safe_load(unwrap_rpc_secret(provider.inputs["kubeconfig"]))
    assert kubeconfig["users"][0]["user"] == {"token": "ya29.deployer"}
    assert kubeconfig["clusters"][0]["cluster"]["server"] == "https://34.0.0.1"
