import pytest

from pulumi_kube_cluster import outputs
from pulumi_kube_cluster.outputs import StackExports


def _constants() -> dict[str, str]:
    return {
        name: value
        for name, value in vars(outputs).items()
        if name.isupper() and isinstance(value, str) and not name.endswith("_SUFFIX")
    }


def test_output_keys_are_unique():
    values = list(_constants().values())
    assert len(values) == len(set(values))


def test_identity_output_keys():
    assert outputs.CERT_MANAGER_GSA_EMAIL == "cert-manager-gsa-email"
    assert outputs.EXTERNAL_SECRETS_GSA_EMAIL == "external-secrets-gsa-email"
    assert outputs.EXTERNAL_DNS_GSA_EMAIL == "external-dns-gsa-email"
    assert (
        outputs.identity_output_name("external-dns", outputs.IAM_ROLE_ARN_SUFFIX)
        == "external-dns-iam-role-arn"
    )


def test_node_pool_output_names_are_stable():
    first = outputs.node_pool_output_name("default", "machine-type")
    assert first == "node-pool-default-machine-type"
    assert outputs.node_pool_output_name("default", "machine-type") == first
    assert outputs.node_pool_output_name("spot", "machine-type") != first


def test_exports_are_forwarded_and_recorded(exported):
    exports = StackExports(export_fn=exported)
    exports.export(outputs.CLUSTER_ENDPOINT, "34.0.0.1")

    assert exported.values == {"cluster-endpoint": "34.0.0.1"}
    assert outputs.CLUSTER_ENDPOINT in exports
    assert exports[outputs.CLUSTER_ENDPOINT] == "34.0.0.1"
    assert exports.keys() == ["cluster-endpoint"]


def test_exporting_a_key_twice_fails(exported):
    exports = StackExports(export_fn=exported)
    exports.export(outputs.FOLDER_ID, "1")
    with pytest.raises(ValueError, match="folder-id"):
        exports.export(outputs.FOLDER_ID, "2")
    assert exports.as_dict() == {"folder-id": "1"}
