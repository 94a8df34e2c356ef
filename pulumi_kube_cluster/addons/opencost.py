"""OpenCost reading usage from the in-cluster prometheus."""

from . import prometheus
from .base import AddonContext, AddonResult, HelmChart, create_namespace, helm_release

CHART = HelmChart(
    name="opencost", repo="https://opencost.github.io/opencost-helm-chart", version="1.41.0"
)
NAMESPACE = "opencost"


def install(ctx: AddonContext) -> AddonResult:
    namespace = create_namespace(ctx, NAMESPACE)
    release = helm_release(
        ctx,
        "opencost",
        CHART,
        namespace,
        values={
            "opencost": {
                "exporter": {"defaultClusterId": ctx.cluster_name},
                "prometheus": {
                    "internal": {
                        "enabled": True,
                        "serviceName": prometheus.PROMETHEUS_SERVICE,
                        "namespaceName": prometheus.NAMESPACE,
                        "port": prometheus.PROMETHEUS_PORT,
                    }
                },
                "ui": {"enabled": True},
            }
        },
    )
    return AddonResult(namespaces=(namespace,), releases=(release,))
