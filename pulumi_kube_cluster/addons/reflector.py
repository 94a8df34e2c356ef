"""Reflector mirroring secrets and config maps across namespaces."""

from .base import AddonContext, AddonResult, HelmChart, create_namespace, helm_release

CHART = HelmChart(
    name="reflector", repo="https://emberstack.github.io/helm-charts", version="7.1.288"
)
NAMESPACE = "reflector"


def install(ctx: AddonContext) -> AddonResult:
    namespace = create_namespace(ctx, NAMESPACE)
    release = helm_release(ctx, "reflector", CHART, namespace, values={})
    return AddonResult(namespaces=(namespace,), releases=(release,))
