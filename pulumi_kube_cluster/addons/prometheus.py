"""kube-prometheus-stack for metrics collection."""

from .base import AddonContext, AddonResult, HelmChart, create_namespace, helm_release

CHART = HelmChart(
    name="kube-prometheus-stack",
    repo="https://prometheus-community.github.io/helm-charts",
    version="61.7.1",
)
NAMESPACE = "monitoring"
RELEASE_NAME = "kube-prometheus-stack"
# service created by the chart for the release above
PROMETHEUS_SERVICE = f"{RELEASE_NAME}-prometheus"
PROMETHEUS_PORT = 9090


def install(ctx: AddonContext) -> AddonResult:
    namespace = create_namespace(ctx, NAMESPACE)
    release = helm_release(
        ctx,
        RELEASE_NAME,
        CHART,
        namespace,
        values={
            "grafana": {"enabled": False},
            "alertmanager": {"enabled": False},
            "prometheus": {
                "prometheusSpec": {
                    "retention": "7d",
                    "serviceMonitorSelectorNilUsesHelmValues": False,
                    "podMonitorSelectorNilUsesHelmValues": False,
                }
            },
        },
    )
    return AddonResult(namespaces=(namespace,), releases=(release,))
