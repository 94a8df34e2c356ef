"""Traefik ingress controller."""

from .base import AddonContext, AddonResult, HelmChart, create_namespace, helm_release

CHART = HelmChart(name="traefik", repo="https://traefik.github.io/charts", version="30.0.2")
NAMESPACE = "traefik"


def install(ctx: AddonContext) -> AddonResult:
    namespace = create_namespace(ctx, NAMESPACE)
    release = helm_release(
        ctx,
        "traefik",
        CHART,
        namespace,
        values={
            "service": {"type": "LoadBalancer"},
            "ingressClass": {"enabled": True, "isDefaultClass": False},
            "providers": {"kubernetesCRD": {"allowCrossNamespace": True}},
        },
    )
    return AddonResult(namespaces=(namespace,), releases=(release,))
