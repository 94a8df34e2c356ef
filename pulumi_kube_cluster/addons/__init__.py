"""
Cluster add-ons installed with Helm.

Every add-on has an installer with the same signature, `install(ctx)`.
`install_addons` runs the installers whose toggle is enabled, in the order
of `INSTALLERS`.
"""

import pulumi

from config.addons import AddonsConfig

from ..errors import AddonError, wrap
from ..outputs import StackExports
from . import (
    cert_manager,
    external_dns,
    external_secrets,
    ingress_nginx,
    istio,
    linkerd,
    opencost,
    postgres_operator,
    prometheus,
    reflector,
    solr_operator,
    strimzi,
    traefik,
)
from .base import AddonContext, AddonInstaller, AddonResult, CloudAddonSettings
from .identity import AwsWorkloadIdentity, GcpWorkloadIdentity, WorkloadIdentity

INSTALLERS: dict[str, AddonInstaller] = {
    "istio": istio.install,
    "cert-manager": cert_manager.install,
    "external-secrets": external_secrets.install,
    "external-dns": external_dns.install,
    "strimzi": strimzi.install,
    "postgres-operator": postgres_operator.install,
    "ingress-nginx": ingress_nginx.install,
    "traefik": traefik.install,
    "linkerd": linkerd.install,
    "reflector": reflector.install,
    "prometheus": prometheus.install,
    "opencost": opencost.install,
    "solr-operator": solr_operator.install,
}


def install_addons(ctx: AddonContext) -> dict[str, AddonResult]:
    results: dict[str, AddonResult] = {}
    for addon, installer in INSTALLERS.items():
        if not ctx.config.is_enabled(addon):
            pulumi.log.debug(f"{addon} add-on is disabled")
            continue
        pulumi.log.info(f"installing {addon} add-on")
        with wrap(f"failed to install {addon}", AddonError):
            results[addon] = installer(ctx)
    return results


class Addons(pulumi.ComponentResource):
    """Parent of every add-on resource of one cluster."""

    def __init__(
        self,
        name: str,
        cluster_name: str,
        config: AddonsConfig,
        cloud: CloudAddonSettings,
        k8s_provider: pulumi.ProviderResource,
        kubernetes_labels: dict[str, str],
        exports: StackExports,
        depends_on: list[pulumi.Resource] | None = None,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__("kube-cluster:addons:Addons", name, None, opts)

        ctx = AddonContext(
            name=name,
            cluster_name=cluster_name,
            config=config,
            cloud=cloud,
            k8s_provider=k8s_provider,
            kubernetes_labels=kubernetes_labels,
            exports=exports,
            parent=self,
            depends_on=list(depends_on or []),
        )
        self.context = ctx
        self.results = install_addons(ctx)

        self.register_outputs({"installed": sorted(self.results)})


__all__ = [
    "INSTALLERS",
    "AddonContext",
    "AddonResult",
    "Addons",
    "AwsWorkloadIdentity",
    "CloudAddonSettings",
    "GcpWorkloadIdentity",
    "WorkloadIdentity",
    "install_addons",
]
