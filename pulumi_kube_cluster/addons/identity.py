"""Cloud identities that add-on pods assume through their Kubernetes service account."""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import pulumi
import pulumi_aws as aws
import pulumi_gcp as gcp

from .. import outputs

GKE_SERVICE_ACCOUNT_ANNOTATION = "iam.gke.io/gcp-service-account"
EKS_ROLE_ARN_ANNOTATION = "eks.amazonaws.com/role-arn"

ROUTE53_POLICY = {
    "Version": "2012-10-17",
    "Statement": [
        {
            "Effect": "Allow",
            "Action": ["route53:ChangeResourceRecordSets"],
            "Resource": "arn:aws:route53:::hostedzone/*",
        },
        {
            "Effect": "Allow",
            "Action": [
                "route53:ListHostedZones",
                "route53:ListHostedZonesByName",
                "route53:ListResourceRecordSets",
                "route53:GetChange",
            ],
            "Resource": "*",
        },
    ],
}

SECRETS_MANAGER_READ_POLICY = {
    "Version": "2012-10-17",
    "Statement": [
        {
            "Effect": "Allow",
            "Action": [
                "secretsmanager:GetResourcePolicy",
                "secretsmanager:GetSecretValue",
                "secretsmanager:DescribeSecret",
                "secretsmanager:ListSecretVersionIds",
                "secretsmanager:ListSecrets",
            ],
            "Resource": "*",
        }
    ],
}


@dataclass(frozen=True)
class IdentityGrant:
    """Permissions an add-on needs, expressed for every supported cloud."""

    gcp_roles: tuple[str, ...] = ()
    aws_policy: dict[str, Any] | None = None


@dataclass(frozen=True)
class BoundIdentity:
    # email of the google service account or arn of the IAM role
    principal: pulumi.Output[str]
    annotations: dict[str, pulumi.Input[str]]
    resources: list[pulumi.Resource] = field(default_factory=list)


def gke_workload_identity_member(project_id: str, namespace: str, ksa_name: str) -> str:
    return f"serviceAccount:{project_id}.svc.id.goog[{namespace}/{ksa_name}]"


def irsa_trust_policy(
    oidc_arn: str, oidc_url: str, namespace: str, service_account: str
) -> str:
    return json.dumps(
        {
            "Version": "2012-10-17",
            "Statement": [
                {
                    "Effect": "Allow",
                    "Principal": {"Federated": oidc_arn},
                    "Action": "sts:AssumeRoleWithWebIdentity",
                    "Condition": {
                        "StringEquals": {
                            f"{oidc_url.replace('https://', '')}:sub": f"system:serviceaccount:{namespace}:{service_account}"
                        }
                    },
                }
            ],
        }
    )


class WorkloadIdentity(ABC):
    """Creates the cloud side of an add-on's identity."""

    output_suffix: str

    @abstractmethod
    def bind(
        self,
        addon: str,
        namespace: pulumi.Input[str],
        ksa_name: str,
        grant: IdentityGrant,
        opts: pulumi.ResourceOptions,
    ) -> BoundIdentity:
        """Create the identity for `ksa_name` in `namespace` and grant it `grant`."""


class GcpWorkloadIdentity(WorkloadIdentity):
    """Google service account that the Kubernetes service account may impersonate."""

    output_suffix = outputs.GSA_EMAIL_SUFFIX

    def __init__(self, name: str, project_id: pulumi.Input[str]):
        self._name = name
        self._project_id = pulumi.Output.from_input(project_id)

    def bind(self, addon, namespace, ksa_name, grant, opts):
        account = gcp.serviceaccount.Account(
            f"{self._name}-{addon}-gsa",
            account_id=addon,
            display_name=addon,
            project=self._project_id,
            opts=opts,
        )
        member = account.email.apply(lambda email: f"serviceAccount:{email}")

        resources: list[pulumi.Resource] = [account]
        for role in grant.gcp_roles:
            resources.append(
                gcp.projects.IAMMember(
                    f"{self._name}-{addon}-{role.rsplit('/', 1)[-1]}",
                    project=self._project_id,
                    role=role,
                    member=member,
                    opts=opts,
                )
            )

        resources.append(
            gcp.serviceaccount.IAMBinding(
                f"{self._name}-{addon}-workload-identity",
                service_account_id=account.name,
                role="roles/iam.workloadIdentityUser",
                members=[
                    pulumi.Output.all(self._project_id, namespace).apply(
                        lambda args: gke_workload_identity_member(args[0], args[1], ksa_name)
                    )
                ],
                opts=pulumi.ResourceOptions.merge(
                    opts, pulumi.ResourceOptions(depends_on=[account])
                ),
            )
        )

        return BoundIdentity(
            principal=account.email,
            annotations={GKE_SERVICE_ACCOUNT_ANNOTATION: account.email},
            resources=resources,
        )


class AwsWorkloadIdentity(WorkloadIdentity):
    """IAM role assumable through the cluster's OIDC provider (IRSA)."""

    output_suffix = outputs.IAM_ROLE_ARN_SUFFIX

    def __init__(
        self,
        name: str,
        oidc_provider_arn: pulumi.Input[str],
        oidc_provider_url: pulumi.Input[str],
        tags: dict[str, str],
    ):
        self._name = name
        self._oidc_arn = pulumi.Output.from_input(oidc_provider_arn)
        self._oidc_url = pulumi.Output.from_input(oidc_provider_url)
        self._tags = tags

    def bind(self, addon, namespace, ksa_name, grant, opts):
        role = aws.iam.Role(
            f"{self._name}-{addon}-role",
            name_prefix=f"{addon}-",
            assume_role_policy=pulumi.Output.all(self._oidc_arn, self._oidc_url, namespace).apply(
                lambda args: irsa_trust_policy(args[0], args[1], args[2], ksa_name)
            ),
            tags={**self._tags, "Name": addon},
            opts=opts,
        )

        resources: list[pulumi.Resource] = [role]
        if grant.aws_policy is not None:
            resources.append(
                aws.iam.RolePolicy(
                    f"{self._name}-{addon}-policy",
                    role=role.name,
                    policy=json.dumps(grant.aws_policy),
                    opts=opts,
                )
            )

        return BoundIdentity(
            principal=role.arn,
            annotations={EKS_ROLE_ARN_ANNOTATION: role.arn},
            resources=resources,
        )
