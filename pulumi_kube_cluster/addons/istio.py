"""Istio control plane with an external and an internal ingress gateway."""

import pulumi_kubernetes as k8s

from .base import AddonContext, AddonResult, HelmChart, create_namespace, helm_release

REPO = "https://istio-release.storage.googleapis.com/charts"
VERSION = "1.22.3"
BASE_CHART = HelmChart(name="base", repo=REPO, version=VERSION)
ISTIOD_CHART = HelmChart(name="istiod", repo=REPO, version=VERSION)
GATEWAY_CHART = HelmChart(name="gateway", repo=REPO, version=VERSION)

SYSTEM_NAMESPACE = "istio-system"
INGRESS_NAMESPACE = "istio-ingress"
EXTERNAL_GATEWAY = "istio-ingress"
INTERNAL_GATEWAY = "istio-ingress-internal"

# number of proxies in front of the gateway whose X-Forwarded-For entries are trusted
XFF_TRUSTED_HOPS = 1


def gateway_values(
    selector: str, load_balancer_ip=None, annotations: dict[str, str] | None = None
) -> dict:
    service: dict = {"type": "LoadBalancer"}
    if load_balancer_ip is not None:
        service["loadBalancerIP"] = load_balancer_ip
    if annotations:
        service["annotations"] = annotations
    return {"labels": {"istio": selector}, "service": service}


def xff_envoy_filter_spec(selector: str, trusted_hops: int = XFF_TRUSTED_HOPS) -> dict:
    return {
        "workloadSelector": {"labels": {"istio": selector}},
        "configPatches": [
            {
                "applyTo": "NETWORK_FILTER",
                "match": {
                    "context": "GATEWAY",
                    "listener": {
                        "filterChain": {
                            "filter": {"name": "envoy.filters.network.http_connection_manager"}
                        }
                    },
                },
                "patch": {
                    "operation": "MERGE",
                    "value": {
                        "typed_config": {
                            "@type": "type.googleapis.com/envoy.extensions.filters.network.http_connection_manager.v3.HttpConnectionManager",
                            "use_remote_address": True,
                            "xff_num_trusted_hops": trusted_hops,
                        }
                    },
                },
            }
        ],
    }


def install(ctx: AddonContext) -> AddonResult:
    system_namespace = create_namespace(ctx, SYSTEM_NAMESPACE)
    ingress_namespace = create_namespace(
        ctx, INGRESS_NAMESPACE, labels={"istio-injection": "enabled"}
    )

    base = helm_release(
        ctx,
        "istio-base",
        BASE_CHART,
        system_namespace,
        values={"defaultRevision": "default"},
        atomic=True,
    )
    istiod = helm_release(
        ctx,
        "istiod",
        ISTIOD_CHART,
        system_namespace,
        values={"meshConfig": {"accessLogFile": "/dev/stdout"}},
        depends_on=[base],
    )

    external = helm_release(
        ctx,
        EXTERNAL_GATEWAY,
        GATEWAY_CHART,
        ingress_namespace,
        values=gateway_values("ingress", ctx.cloud.ingress_external_ip),
        depends_on=[istiod],
    )
    internal = helm_release(
        ctx,
        INTERNAL_GATEWAY,
        GATEWAY_CHART,
        ingress_namespace,
        values=gateway_values(
            "ingress-internal",
            ctx.cloud.ingress_internal_ip,
            ctx.cloud.internal_lb_annotations,
        ),
        depends_on=[istiod],
    )

    envoy_filter = k8s.apiextensions.CustomResource(
        f"{ctx.name}-istio-xff-trusted-hops",
        api_version="networking.istio.io/v1alpha3",
        kind="EnvoyFilter",
        metadata=k8s.meta.v1.ObjectMetaArgs(
            name="xff-trusted-hops",
            namespace=ingress_namespace.metadata.name,
            labels=ctx.kubernetes_labels,
        ),
        spec=xff_envoy_filter_spec("ingress"),
        opts=ctx.opts(depends_on=[external]),
    )

    return AddonResult(
        namespaces=(system_namespace, ingress_namespace),
        releases=(base, istiod, external, internal),
        manifests=(envoy_filter,),
    )
