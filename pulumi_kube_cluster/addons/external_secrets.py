"""external-secrets operator and the cluster-wide store backed by the cloud's secret manager."""

import pulumi_kubernetes as k8s

from .base import AddonContext, AddonResult, HelmChart, bind_identity, create_namespace, helm_release
from .identity import SECRETS_MANAGER_READ_POLICY, IdentityGrant

CHART = HelmChart(
    name="external-secrets", repo="https://charts.external-secrets.io", version="v0.9.20"
)
NAMESPACE = "external-secrets"
KSA_NAME = "external-secrets"
POLLING_INTERVAL_SECONDS = 10

SECRETS_GRANT = IdentityGrant(
    gcp_roles=("roles/secretmanager.secretAccessor",),
    aws_policy=SECRETS_MANAGER_READ_POLICY,
)


def install(ctx: AddonContext) -> AddonResult:
    namespace = create_namespace(ctx, NAMESPACE)
    identity, service_account = bind_identity(
        ctx, "external-secrets", namespace, KSA_NAME, SECRETS_GRANT
    )

    release = helm_release(
        ctx,
        "external-secrets",
        CHART,
        namespace,
        values={
            "installCRDs": True,
            "customResourceManagerDisabled": False,
            "crds": {"createClusterSecretStore": True, "createClusterExternalSecret": True},
            "env": {
                "POLLER_INTERVAL_MILLISECONDS": POLLING_INTERVAL_SECONDS * 1000,
                "LOG_LEVEL": "info",
                "LOG_MESSAGE_KEY": "msg",
                "METRICS_PORT": 3001,
            },
            "rbac": {"create": True},
            "serviceAccount": {"create": False, "name": KSA_NAME},
            "replicaCount": 1,
        },
        depends_on=[service_account],
    )

    store = k8s.apiextensions.CustomResource(
        f"{ctx.name}-external-secrets-cluster-secret-store",
        api_version="external-secrets.io/v1beta1",
        kind="ClusterSecretStore",
        metadata=k8s.meta.v1.ObjectMetaArgs(
            name=ctx.cloud.secret_store_name, labels=ctx.kubernetes_labels
        ),
        spec={
            "provider": ctx.cloud.secret_store_provider,
            "refreshInterval": POLLING_INTERVAL_SECONDS,
        },
        opts=ctx.opts(depends_on=[release]),
    )

    return AddonResult(
        namespaces=(namespace,),
        releases=(release,),
        identity=identity,
        manifests=(store,),
    )
