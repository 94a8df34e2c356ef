import json

import pytest

from pulumi_kube_cluster.addons.identity import (
    WorkloadIdentity,
    gke_workload_identity_member,
    irsa_trust_policy,
)


def test_gke_workload_identity_member():
    assert (
        gke_workload_identity_member("proj-1", "cert-manager", "cert-manager")
        == "serviceAccount:proj-1.svc.id.goog[cert-manager/cert-manager]"
    )


def test_irsa_trust_policy_scopes_to_service_account():
    policy = json.loads(
        irsa_trust_policy(
            "arn:aws:iam::123:oidc-provider/oidc.eks.us-east-1.amazonaws.com/id/ABC",
            "https://oidc.eks.us-east-1.amazonaws.com/id/ABC",
            "external-dns",
            "external-dns",
        )
    )
    statement = policy["Statement"][0]
    assert statement["Action"] == "sts:AssumeRoleWithWebIdentity"
    assert statement["Condition"]["StringEquals"] == {
        "oidc.eks.us-east-1.amazonaws.com/id/ABC:sub": "system:serviceaccount:external-dns:external-dns"
    }


def test_workload_identity_requires_bind():
    class Unbound(WorkloadIdentity):
        output_suffix = "-unbound"

    with pytest.raises(TypeError):
        Unbound()
