"""external-dns keeping cloud dns records in sync with services and ingresses."""

from .base import AddonContext, AddonResult, HelmChart, bind_identity, create_namespace, helm_release
from .identity import ROUTE53_POLICY, IdentityGrant

CHART = HelmChart(
    name="external-dns",
    repo="https://kubernetes-sigs.github.io/external-dns",
    version="1.14.5",
)
NAMESPACE = "external-dns"
KSA_NAME = "external-dns"

DNS_GRANT = IdentityGrant(gcp_roles=("roles/dns.admin",), aws_policy=ROUTE53_POLICY)


def install(ctx: AddonContext) -> AddonResult:
    namespace = create_namespace(ctx, NAMESPACE)
    identity, service_account = bind_identity(ctx, "external-dns", namespace, KSA_NAME, DNS_GRANT)

    sources = ["service", "ingress"]
    if ctx.config.istio:
        sources += ["istio-gateway", "istio-virtualservice"]

    values = {
        "serviceAccount": {"create": False, "name": KSA_NAME},
        "policy": "sync",
        "txtOwnerId": ctx.cluster_name,
        "sources": sources,
        "domainFilters": ctx.config.dns_domains,
        **ctx.cloud.external_dns_values,
    }

    release = helm_release(
        ctx, "external-dns", CHART, namespace, values=values, depends_on=[service_account]
    )

    return AddonResult(namespaces=(namespace,), releases=(release,), identity=identity)
