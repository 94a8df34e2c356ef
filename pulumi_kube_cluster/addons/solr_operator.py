"""Apache solr-operator and the CRDs it expects to be installed beforehand."""

import pulumi_kubernetes as k8s

from .base import AddonContext, AddonResult, HelmChart, create_namespace, helm_release

CHART = HelmChart(name="solr-operator", repo="https://solr.apache.org/charts", version="0.8.1")
NAMESPACE = "solr-operator"
CRDS_URL = (
    f"https://solr.apache.org/operator/downloads/crds/v{CHART.version}/all-with-dependencies.yaml"
)


def install(ctx: AddonContext) -> AddonResult:
    namespace = create_namespace(ctx, NAMESPACE)
    crds = k8s.yaml.v2.ConfigFile(
        f"{ctx.name}-solr-operator-crds",
        file=CRDS_URL,
        opts=ctx.opts(),
    )
    release = helm_release(
        ctx,
        "solr-operator",
        CHART,
        namespace,
        values={"zookeeper-operator": {"install": True}},
        depends_on=[crds],
    )
    return AddonResult(namespaces=(namespace,), releases=(release,), manifests=(crds,))
