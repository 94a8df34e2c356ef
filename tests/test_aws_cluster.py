import json
from types import SimpleNamespace

import pulumi
import pytest

from config import AddonsConfig, AWSConfig, NodePoolConfig
from pulumi_kube_cluster import AwsKubeCluster, outputs
from pulumi_kube_cluster.aws import eks as eks_module
from pulumi_kube_cluster.outputs import StackExports

OIDC_ARN = "arn:aws:iam::123456789012:oidc-provider/oidc.eks.us-east-1.amazonaws.com/id/ABC"
OIDC_URL = "https://oidc.eks.us-east-1.amazonaws.com/id/ABC"


class LocalEksCluster(pulumi.ComponentResource):
    """In-process replacement for the eks.Cluster component, which needs its plugin."""

    def __init__(self, resource_name, opts=None, **kwargs):
        super().__init__("eks:index:Cluster", resource_name, None, opts)
        self.args = kwargs
        self.kubeconfig = pulumi.Output.from_input({"apiVersion": "v1", "kind": "Config"})
        self.eks_cluster = SimpleNamespace(
            name=pulumi.Output.from_input(kwargs["name"]),
            endpoint=pulumi.Output.from_input("https://ABC.gr7.us-east-1.eks.amazonaws.com"),
            certificate_authority=SimpleNamespace(data=pulumi.Output.from_input("Y2E=")),
        )
        self.core = SimpleNamespace(
            oidc_provider=SimpleNamespace(
                arn=pulumi.Output.from_input(OIDC_ARN),
                url=pulumi.Output.from_input(OIDC_URL),
            )
        )


@pytest.fixture
def local_eks(monkeypatch):
    monkeypatch.setattr(eks_module.eks, "Cluster", LocalEksCluster)


def _aws_config(**overrides) -> AWSConfig:
    values = {
        "name": "demo",
        "id": "demo-id",
        "region": "us-east-1",
        "availability_zones": ["us-east-1a", "us-east-1b"],
        "addons": AddonsConfig(external_dns=True),
    }
    values.update(overrides)
    return AWSConfig(**values)


def _declare(config, exported):
    holder = {}

    @pulumi.runtime.test
    def declare():
        holder["cluster"] = AwsKubeCluster(
            "demo", config, exports=StackExports(export_fn=exported)
        )

    declare()
    return holder["cluster"]


def test_cluster_outputs_are_exported(mocks, exported, local_eks):
    _declare(_aws_config(), exported)

    for key in (
        outputs.CLUSTER_VPC_ID,
        outputs.CLUSTER_ENDPOINT,
        outputs.CLUSTER_CA_DATA,
        outputs.CLUSTER_KUBECONFIG,
    ):
        assert key in exported.values

    [eks_cluster] = [r for r in mocks.resources if r.typ == "eks:index:Cluster"]
    assert eks_cluster.name == "demo-eks-cluster"


def test_vpc_subnets_per_zone(mocks, exported, local_eks):
    _declare(_aws_config(), exported)

    subnets = {s.name: s.inputs["cidrBlock"] for s in mocks.of_kind("Subnet")}
    assert subnets == {
        "demo-vpc-public-us-east-1a": "10.0.0.0/20",
        "demo-vpc-private-us-east-1a": "10.0.64.0/18",
        "demo-vpc-public-us-east-1b": "10.0.16.0/20",
        "demo-vpc-private-us-east-1b": "10.0.128.0/18",
    }
    assert len(mocks.of_kind("NatGateway")) == 2
    # one shared public route table plus one private table per zone
    assert len(mocks.of_kind("RouteTable")) == 3


def test_node_groups_follow_node_pools(mocks, exported, local_eks):
    config = _aws_config(
        node_pools=[
            NodePoolConfig(name="workers", instance_type="m5.xlarge", desired_size=2, max_size=4),
            NodePoolConfig(name="spot", is_spot_enabled=True),
        ]
    )
    cluster = _declare(config, exported)

    groups = {g.inputs["nodeGroupName"]: g.inputs for g in mocks.of_kind("NodeGroup")}
    assert set(groups) == {"demo-id-workers", "demo-id-spot"}
    assert groups["demo-id-workers"]["instanceTypes"] == ["m5.xlarge"]
    assert groups["demo-id-workers"]["scalingConfig"] == {
        "desiredSize": 2,
        "minSize": 1,
        "maxSize": 4,
    }
    assert groups["demo-id-spot"]["capacityType"] == "SPOT"

    # add-ons wait for schedulable nodes
    assert cluster.addons.context.depends_on == cluster.eks.node_groups


def test_addon_identity_is_an_irsa_role(mocks, exported, local_eks):
    _declare(_aws_config(), exported)

    [role] = [r for r in mocks.of_kind("Role") if r.name == "demo-external-dns-role"]
    statement = json.loads(role.inputs["assumeRolePolicy"])["Statement"][0]
    assert statement["Principal"] == {"Federated": OIDC_ARN}
    assert statement["Condition"]["StringEquals"] == {
        "oidc.eks.us-east-1.amazonaws.com/id/ABC:sub": "system:serviceaccount:external-dns:external-dns"
    }

    [policy] = mocks.of_kind("RolePolicy")
    assert "route53:ChangeResourceRecordSets" in policy.inputs["policy"]

    [ksa] = mocks.of_kind("ServiceAccount")
    assert ksa.inputs["metadata"]["annotations"] == {
        "eks.amazonaws.com/role-arn": "arn:aws:iam::123456789012:role/demo-external-dns-role"
    }
    assert "external-dns-iam-role-arn" in exported.values
    assert not mocks.of_kind("Account")
