"""ingress-nginx controller behind a cloud load balancer."""

from .base import AddonContext, AddonResult, HelmChart, create_namespace, helm_release

CHART = HelmChart(
    name="ingress-nginx", repo="https://kubernetes.github.io/ingress-nginx", version="4.11.1"
)
NAMESPACE = "ingress-nginx"


def install(ctx: AddonContext) -> AddonResult:
    namespace = create_namespace(ctx, NAMESPACE)
    release = helm_release(
        ctx,
        "ingress-nginx",
        CHART,
        namespace,
        values={
            "controller": {
                "service": {"type": "LoadBalancer", "externalTrafficPolicy": "Local"},
                "ingressClassResource": {"name": "nginx", "default": False},
                "metrics": {"enabled": True},
            }
        },
    )
    return AddonResult(namespaces=(namespace,), releases=(release,))
