import pytest

from pulumi_kube_cluster.errors import AddonError, KubeClusterError, ResourceError, wrap


def test_wrap_chains_descriptions():
    with pytest.raises(ResourceError) as excinfo:
        with wrap("failed to add addons"):
            with wrap("failed to install istio", AddonError):
                raise RuntimeError("boom")

    assert str(excinfo.value) == "failed to add addons: failed to install istio: boom"
    assert isinstance(excinfo.value.__cause__, AddonError)
    assert isinstance(excinfo.value.__cause__.__cause__, RuntimeError)


def test_wrap_passes_through_without_error():
    with wrap("failed to add folder"):
        value = 1
    assert value == 1


def test_error_hierarchy():
    assert issubclass(AddonError, ResourceError)
    assert issubclass(ResourceError, KubeClusterError)
    assert str(ResourceError("failed to add iam")) == "failed to add iam"
