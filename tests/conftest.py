import pulumi
import pytest


def _extra_outputs(args: pulumi.runtime.MockResourceArgs) -> dict:
    kind = args.typ.split(":")[-1]
    inputs = args.inputs
    if kind == "RandomString":
        return {"result": "x7"}
    if kind == "Project":
        return {"number": "123456789012"}
    if kind == "Folder":
        return {"folderId": "987654321"}
    if kind == "Account":
        account_id = inputs.get("accountId")
        return {
            "email": f"{account_id}@test-project.iam.gserviceaccount.com",
            "name": f"projects/test-project/serviceAccounts/{account_id}",
        }
    if kind == "Address":
        return {"address": "34.0.0.10"}
    if kind == "Role":
        return {
            "arn": f"arn:aws:iam::123456789012:role/{args.name}",
            "name": args.name,
        }
    if kind == "Key":
        return {"privateKey": "c2VjcmV0"}
    if kind == "Cluster":
        return {
            "endpoint": "34.0.0.1",
            "masterAuth": {"clusterCaCertificate": "Y2EtZGF0YQ=="},
        }
    return {}


class KubeClusterMocks(pulumi.runtime.Mocks):
    """Records every registered resource and fills in computed attributes."""

    def __init__(self):
        self.resources: list[pulumi.runtime.MockResourceArgs] = []

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        self.resources.append(args)
        outputs = dict(args.inputs)
        outputs.setdefault("selfLink", f"https://example.test/{args.name}")
        outputs.update(_extra_outputs(args))
        return [f"{args.name}_id", outputs]

    def call(self, args: pulumi.runtime.MockCallArgs):
        if args.token == "gcp:organizations/getClientConfig:getClientConfig":
            return {
                "accessToken": "ya29.deployer",
                "id": "client-config",
                "project": "test-project",
                "region": "us-central1",
                "zone": "us-central1-a",
                "defaultLabels": {},
            }
        return {}

    def names(self) -> set[str]:
        return {r.name for r in self.resources}

    def of_kind(self, kind: str) -> list[pulumi.runtime.MockResourceArgs]:
        return [r for r in self.resources if r.typ.split(":")[-1] == kind]


@pytest.fixture
def mocks():
    m = KubeClusterMocks()
    pulumi.runtime.set_mocks(m, project="kube-cluster", stack="test", preview=False)
    return m


@pytest.fixture
def exported():
    values: dict = {}

    def export(key, value):
        values[key] = value

    export.values = values
    return export
