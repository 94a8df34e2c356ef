"""Zalando postgres-operator."""

from .base import AddonContext, AddonResult, HelmChart, create_namespace, helm_release

CHART = HelmChart(
    name="postgres-operator",
    repo="https://opensource.zalando.com/postgres-operator/charts/postgres-operator",
    version="1.12.2",
)
NAMESPACE = "postgres-operator"


def install(ctx: AddonContext) -> AddonResult:
    namespace = create_namespace(ctx, NAMESPACE)
    release = helm_release(
        ctx,
        "postgres-operator",
        CHART,
        namespace,
        values={
            "configKubernetes": {
                "enable_pod_antiaffinity": True,
                "watched_namespace": "*",
            }
        },
    )
    return AddonResult(namespaces=(namespace,), releases=(release,))
