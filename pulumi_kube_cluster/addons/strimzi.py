"""Strimzi operator for Kafka clusters."""

from .base import AddonContext, AddonResult, HelmChart, create_namespace, helm_release

CHART = HelmChart(
    name="strimzi-kafka-operator", repo="https://strimzi.io/charts", version="0.42.0"
)
NAMESPACE = "strimzi-operator"


def install(ctx: AddonContext) -> AddonResult:
    namespace = create_namespace(ctx, NAMESPACE)
    release = helm_release(
        ctx,
        "strimzi-kafka-operator",
        CHART,
        namespace,
        values={"watchAnyNamespace": True},
    )
    return AddonResult(namespaces=(namespace,), releases=(release,))
