"""Folder and projects that hold a GKE cluster and its network."""

import pulumi
import pulumi_gcp as gcp
import pulumi_random as random

from .. import outputs
from ..errors import wrap
from ..outputs import StackExports
from .locals import Locals

NETWORK_PROJECT_APIS = [
    "compute.googleapis.com",
    "container.googleapis.com",
    "dns.googleapis.com",
]

CLUSTER_PROJECT_APIS = [
    "compute.googleapis.com",
    "container.googleapis.com",
    "secretmanager.googleapis.com",
    "dns.googleapis.com",
]

RANDOM_SUFFIX_LENGTH = 2


def needs_shared_vpc_iam(
    cluster_project: gcp.organizations.Project,
    network_project: gcp.organizations.Project,
) -> bool:
    """Shared VPC bindings only make sense across two distinct projects."""
    return cluster_project is not network_project


class Projects(pulumi.ComponentResource):
    """
    Folder plus the cluster project and, for shared VPC, a network project.

    Without shared VPC the cluster project also hosts the network and both
    `cluster_project` and `network_project` refer to the same resource.
    """

    def __init__(
        self,
        name: str,
        cluster_locals: Locals,
        exports: StackExports,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__("kube-cluster:gcp:Projects", name, None, opts)

        config = cluster_locals.config
        prefix = config.project_prefix

        with wrap("failed to create folder"):
            self.folder = gcp.organizations.Folder(
                f"{name}-folder",
                display_name=f"{prefix}-{config.name}",
                parent=config.folder_parent,
                opts=pulumi.ResourceOptions(parent=self),
            )
        exports.export(outputs.FOLDER_ID, self.folder.folder_id)
        exports.export(outputs.FOLDER_NAME, self.folder.display_name)
        exports.export(outputs.FOLDER_PARENT, self.folder.parent)

        with wrap("failed to create container cluster project"):
            self.cluster_project = self._create_project(
                f"{name}-cluster", cluster_locals, kind="c"
            )
            cluster_services = self._enable_apis(
                f"{name}-cluster", self.cluster_project, CLUSTER_PROJECT_APIS
            )
        exports.export(
            outputs.CONTAINER_CLUSTER_PROJECT_ID, self.cluster_project.project_id
        )
        exports.export(
            outputs.CONTAINER_CLUSTER_PROJECT_NUMBER, self.cluster_project.number
        )

        network_services: list[gcp.projects.Service] = []
        if config.is_create_shared_vpc:
            pulumi.log.info("creating a separate network project for shared vpc")
            with wrap("failed to create vpc network project"):
                self.network_project = self._create_project(
                    f"{name}-network", cluster_locals, kind="n"
                )
                network_services = self._enable_apis(
                    f"{name}-network", self.network_project, NETWORK_PROJECT_APIS
                )
        else:
            self.network_project = self.cluster_project
        exports.export(outputs.VPC_NETWORK_PROJECT_ID, self.network_project.project_id)
        exports.export(outputs.VPC_NETWORK_PROJECT_NUMBER, self.network_project.number)

        self.services = [*cluster_services, *network_services]

        self.register_outputs(
            {
                "folder_id": self.folder.folder_id,
                "cluster_project_id": self.cluster_project.project_id,
                "network_project_id": self.network_project.project_id,
            }
        )

    def _create_project(
        self, name: str, cluster_locals: Locals, kind: str
    ) -> gcp.organizations.Project:
        config = cluster_locals.config
        suffix = random.RandomString(
            f"{name}-project-suffix",
            length=RANDOM_SUFFIX_LENGTH,
            special=False,
            upper=False,
            lower=True,
            numeric=True,
            opts=pulumi.ResourceOptions(parent=self),
        )
        project_id = pulumi.Output.concat(
            config.project_prefix, "-", config.name, f"-{kind}", suffix.result
        )
        return gcp.organizations.Project(
            f"{name}-project",
            name=project_id,
            project_id=project_id,
            folder_id=self.folder.folder_id,
            billing_account=config.billing_account_id,
            auto_create_network=False,
            labels=cluster_locals.gcp_labels,
            opts=pulumi.ResourceOptions(parent=self),
        )

    def _enable_apis(
        self,
        name: str,
        project: gcp.organizations.Project,
        apis: list[str],
    ) -> list[gcp.projects.Service]:
        return [
            gcp.projects.Service(
                f"{name}-{api}",
                project=project.project_id,
                service=api,
                disable_dependent_services=True,
                opts=pulumi.ResourceOptions(parent=self),
            )
            for api in apis
        ]

    @property
    def is_shared_vpc(self) -> bool:
        return needs_shared_vpc_iam(self.cluster_project, self.network_project)

    @property
    def cluster_project_id(self) -> pulumi.Output[str]:
        return self.cluster_project.project_id

    @property
    def network_project_id(self) -> pulumi.Output[str]:
        return self.network_project.project_id
