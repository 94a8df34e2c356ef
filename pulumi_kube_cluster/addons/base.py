"""Shared building blocks for the add-on installers."""

from dataclasses import dataclass, field
from typing import Any, Callable

import pulumi
import pulumi_kubernetes as k8s
from pulumi_kubernetes.helm.v3 import Release, ReleaseArgs

from config.addons import AddonsConfig

from ..outputs import StackExports, identity_output_name
from .identity import BoundIdentity, IdentityGrant, WorkloadIdentity

HELM_TIMEOUT_SECONDS = 180
# fields helm rewrites on every upgrade
RELEASE_IGNORED_CHANGES = ["status", "description", "resourceNames"]


@dataclass(frozen=True)
class HelmChart:
    name: str
    repo: str
    version: str


@dataclass(frozen=True)
class CloudAddonSettings:
    """Cloud specific inputs add-ons plug into their manifests and values."""

    cloud: str
    identity: WorkloadIdentity
    secret_store_name: str
    secret_store_provider: dict[str, Any]
    dns01_solver: dict[str, Any]
    external_dns_values: dict[str, Any]
    internal_lb_annotations: dict[str, str] = field(default_factory=dict)
    ingress_external_ip: pulumi.Input[str] | None = None
    ingress_internal_ip: pulumi.Input[str] | None = None


@dataclass(frozen=True)
class AddonContext:
    name: str
    cluster_name: str
    config: AddonsConfig
    cloud: CloudAddonSettings
    k8s_provider: pulumi.ProviderResource
    kubernetes_labels: dict[str, str]
    exports: StackExports
    parent: pulumi.Resource
    # resources every add-on waits for, usually the node pools
    depends_on: list[pulumi.Resource] = field(default_factory=list)

    def opts(self, depends_on: list[pulumi.Resource] | None = None) -> pulumi.ResourceOptions:
        return pulumi.ResourceOptions(
            parent=self.parent,
            provider=self.k8s_provider,
            depends_on=[*self.depends_on, *(depends_on or [])],
        )

    def cloud_opts(self) -> pulumi.ResourceOptions:
        return pulumi.ResourceOptions(parent=self.parent, depends_on=list(self.depends_on))


@dataclass(frozen=True)
class AddonResult:
    namespaces: tuple[k8s.core.v1.Namespace, ...] = ()
    releases: tuple[Release, ...] = ()
    identity: BoundIdentity | None = None
    manifests: tuple[pulumi.Resource, ...] = ()


AddonInstaller = Callable[[AddonContext], AddonResult]


def create_namespace(
    ctx: AddonContext, name: str, labels: dict[str, str] | None = None
) -> k8s.core.v1.Namespace:
    return k8s.core.v1.Namespace(
        f"{ctx.name}-{name}-namespace",
        metadata=k8s.meta.v1.ObjectMetaArgs(
            name=name,
            labels={**ctx.kubernetes_labels, **(labels or {})},
        ),
        opts=ctx.opts(),
    )


def bind_identity(
    ctx: AddonContext,
    addon: str,
    namespace: k8s.core.v1.Namespace,
    ksa_name: str,
    grant: IdentityGrant,
) -> tuple[BoundIdentity, k8s.core.v1.ServiceAccount]:
    """Create the add-on's cloud identity and the service account that assumes it."""
    identity = ctx.cloud.identity.bind(
        addon,
        namespace=namespace.metadata.name,
        ksa_name=ksa_name,
        grant=grant,
        opts=ctx.cloud_opts(),
    )
    ctx.exports.export(
        identity_output_name(addon, ctx.cloud.identity.output_suffix), identity.principal
    )

    service_account = k8s.core.v1.ServiceAccount(
        f"{ctx.name}-{addon}-ksa",
        metadata=k8s.meta.v1.ObjectMetaArgs(
            name=ksa_name,
            namespace=namespace.metadata.name,
            labels=ctx.kubernetes_labels,
            annotations=identity.annotations,
        ),
        opts=ctx.opts(depends_on=[namespace]),
    )
    return identity, service_account


def helm_release(
    ctx: AddonContext,
    release_name: str,
    chart: HelmChart,
    namespace: k8s.core.v1.Namespace,
    values: dict[str, Any],
    depends_on: list[pulumi.Resource] | None = None,
    atomic: bool = False,
) -> Release:
    """Helm release pinned to a chart version with the common install policy."""
    return Release(
        f"{ctx.name}-{release_name}",
        ReleaseArgs(
            name=release_name,
            chart=chart.name,
            version=chart.version,
            repository_opts=k8s.helm.v3.RepositoryOptsArgs(repo=chart.repo),
            namespace=namespace.metadata.name,
            create_namespace=False,
            atomic=atomic,
            cleanup_on_fail=True,
            wait_for_jobs=True,
            timeout=HELM_TIMEOUT_SECONDS,
            values=values,
        ),
        opts=pulumi.ResourceOptions.merge(
            ctx.opts(depends_on=[namespace, *(depends_on or [])]),
            pulumi.ResourceOptions(ignore_changes=RELEASE_IGNORED_CHANGES),
        ),
    )
