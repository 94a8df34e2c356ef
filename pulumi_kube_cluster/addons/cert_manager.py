"""cert-manager with a self-signed issuer and an optional ACME issuer."""

import pulumi_kubernetes as k8s

from .base import AddonContext, AddonResult, HelmChart, bind_identity, create_namespace, helm_release
from .identity import ROUTE53_POLICY, IdentityGrant

CHART = HelmChart(name="cert-manager", repo="https://charts.jetstack.io", version="v1.15.1")
NAMESPACE = "cert-manager"
KSA_NAME = "cert-manager"
SELF_SIGNED_ISSUER = "self-signed"
LETSENCRYPT_ISSUER = "letsencrypt"
LETSENCRYPT_SERVER = "https://acme-v02.api.letsencrypt.org/directory"

# dns01 challenges are solved by writing records into the cloud's dns zones
DNS_GRANT = IdentityGrant(gcp_roles=("roles/dns.admin",), aws_policy=ROUTE53_POLICY)


def install(ctx: AddonContext) -> AddonResult:
    namespace = create_namespace(ctx, NAMESPACE)
    identity, service_account = bind_identity(ctx, "cert-manager", namespace, KSA_NAME, DNS_GRANT)

    release = helm_release(
        ctx,
        "cert-manager",
        CHART,
        namespace,
        values={
            "crds": {"enabled": True, "keep": True},
            "serviceAccount": {"create": False, "name": KSA_NAME},
            "extraArgs": [
                "--dns01-recursive-nameservers-only",
                "--dns01-recursive-nameservers=8.8.8.8:53,1.1.1.1:53",
            ],
        },
        depends_on=[service_account],
    )

    issuers = [
        k8s.apiextensions.CustomResource(
            f"{ctx.name}-cert-manager-self-signed-issuer",
            api_version="cert-manager.io/v1",
            kind="ClusterIssuer",
            metadata=k8s.meta.v1.ObjectMetaArgs(
                name=SELF_SIGNED_ISSUER, labels=ctx.kubernetes_labels
            ),
            spec={"selfSigned": {}},
            opts=ctx.opts(depends_on=[release]),
        )
    ]

    if ctx.config.acme_email:
        issuers.append(
            k8s.apiextensions.CustomResource(
                f"{ctx.name}-cert-manager-letsencrypt-issuer",
                api_version="cert-manager.io/v1",
                kind="ClusterIssuer",
                metadata=k8s.meta.v1.ObjectMetaArgs(
                    name=LETSENCRYPT_ISSUER, labels=ctx.kubernetes_labels
                ),
                spec={
                    "acme": {
                        "email": ctx.config.acme_email,
                        "server": LETSENCRYPT_SERVER,
                        "privateKeySecretRef": {"name": f"{LETSENCRYPT_ISSUER}-account-key"},
                        "solvers": [{"dns01": ctx.cloud.dns01_solver}],
                    }
                },
                opts=ctx.opts(depends_on=[release]),
            )
        )

    return AddonResult(
        namespaces=(namespace,),
        releases=(release,),
        identity=identity,
        manifests=tuple(issuers),
    )
