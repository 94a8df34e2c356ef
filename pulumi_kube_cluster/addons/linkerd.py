"""Linkerd service mesh with an identity issuer signed by a generated trust anchor."""

import pulumi_tls as tls

from .base import AddonContext, AddonResult, HelmChart, create_namespace, helm_release

REPO = "https://helm.linkerd.io/stable"
CRDS_CHART = HelmChart(name="linkerd-crds", repo=REPO, version="1.8.0")
CONTROL_PLANE_CHART = HelmChart(name="linkerd-control-plane", repo=REPO, version="1.16.11")
NAMESPACE = "linkerd"

TRUST_ANCHOR_CN = "root.linkerd.cluster.local"
ISSUER_CN = "identity.linkerd.cluster.local"
TRUST_ANCHOR_VALIDITY_HOURS = 87600
ISSUER_VALIDITY_HOURS = 8760
CA_USES = ["cert_signing", "crl_signing", "server_auth", "client_auth"]


class LinkerdCertificates:
    def __init__(self, ctx: AddonContext):
        opts = ctx.cloud_opts()

        self.trust_anchor_key = tls.PrivateKey(
            f"{ctx.name}-linkerd-trust-anchor-key",
            algorithm="ECDSA",
            ecdsa_curve="P256",
            opts=opts,
        )
        self.trust_anchor = tls.SelfSignedCert(
            f"{ctx.name}-linkerd-trust-anchor",
            private_key_pem=self.trust_anchor_key.private_key_pem,
            is_ca_certificate=True,
            set_subject_key_id=True,
            validity_period_hours=TRUST_ANCHOR_VALIDITY_HOURS,
            allowed_uses=CA_USES,
            subject=tls.SelfSignedCertSubjectArgs(common_name=TRUST_ANCHOR_CN),
            opts=opts,
        )

        self.issuer_key = tls.PrivateKey(
            f"{ctx.name}-linkerd-issuer-key",
            algorithm="ECDSA",
            ecdsa_curve="P256",
            opts=opts,
        )
        issuer_request = tls.CertRequest(
            f"{ctx.name}-linkerd-issuer-request",
            private_key_pem=self.issuer_key.private_key_pem,
            subject=tls.CertRequestSubjectArgs(common_name=ISSUER_CN),
            opts=opts,
        )
        self.issuer = tls.LocallySignedCert(
            f"{ctx.name}-linkerd-issuer",
            cert_request_pem=issuer_request.cert_request_pem,
            ca_private_key_pem=self.trust_anchor_key.private_key_pem,
            ca_cert_pem=self.trust_anchor.cert_pem,
            is_ca_certificate=True,
            set_subject_key_id=True,
            validity_period_hours=ISSUER_VALIDITY_HOURS,
            allowed_uses=CA_USES,
            opts=opts,
        )


def install(ctx: AddonContext) -> AddonResult:
    namespace = create_namespace(
        ctx,
        NAMESPACE,
        labels={
            "linkerd.io/is-control-plane": "true",
            "config.linkerd.io/admission-webhooks": "disabled",
            "linkerd.io/control-plane-ns": NAMESPACE,
        },
    )
    certs = LinkerdCertificates(ctx)

    crds = helm_release(ctx, "linkerd-crds", CRDS_CHART, namespace, values={})
    control_plane = helm_release(
        ctx,
        "linkerd-control-plane",
        CONTROL_PLANE_CHART,
        namespace,
        values={
            "identityTrustAnchorsPEM": certs.trust_anchor.cert_pem,
            "identity": {
                "issuer": {
                    "tls": {
                        "crtPEM": certs.issuer.cert_pem,
                        "keyPEM": certs.issuer_key.private_key_pem,
                    }
                }
            },
        },
        depends_on=[crds],
    )

    return AddonResult(namespaces=(namespace,), releases=(crds, control_plane))
