import yaml

from config import ClusterAutoscalingConfig
from pulumi_kube_cluster.gcp.gke import cluster_autoscaling_args, render_kubeconfig


def test_kubeconfig_uses_gcloud_auth_plugin():
    kubeconfig = yaml.safe_load(render_kubeconfig("demo-x7", "34.0.0.1", "Y2E="))

    assert kubeconfig["current-context"] == "demo-x7"
    cluster = kubeconfig["clusters"][0]["cluster"]
    assert cluster["server"] == "https://34.0.0.1"
    assert cluster["certificate-authority-data"] == "Y2E="
    assert kubeconfig["users"][0]["user"]["exec"]["command"] == "gke-gcloud-auth-plugin"


def test_kubeconfig_with_access_token():
    kubeconfig = yaml.safe_load(
        render_kubeconfig("demo-x7", "34.0.0.1", "Y2E=", token="ya29.deployer")
    )

    assert kubeconfig["users"] == [{"name": "demo-x7", "user": {"token": "ya29.deployer"}}]


def test_autoscaling_disabled():
    assert cluster_autoscaling_args(ClusterAutoscalingConfig()) is None


def test_autoscaling_limits():
    args = cluster_autoscaling_args(
        ClusterAutoscalingConfig(
            is_enabled=True,
            cpu_min_cores=2,
            cpu_max_cores=32,
            memory_min_gb=8,
            memory_max_gb=128,
        )
    )
    assert args.autoscaling_profile == "OPTIMIZE_UTILIZATION"
    limits = {limit.resource_type: (limit.minimum, limit.maximum) for limit in args.resource_limits}
    assert limits == {"cpu": (2, 32), "memory": (8, 128)}
