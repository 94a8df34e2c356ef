"""Add-on toggles shared by every cloud."""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AddonsConfig(BaseModel):
    """
    Which cluster add-ons to install.

    Every add-on is off unless enabled. Fields are named after the add-on
    with hyphens replaced by underscores, see `is_enabled`.
    """

    # stack config spells add-ons with hyphens, e.g. "cert-manager: true"
    model_config = ConfigDict(
        alias_generator=lambda field: field.replace("_", "-"), populate_by_name=True
    )

    cert_manager: bool = False
    external_secrets: bool = False
    external_dns: bool = False
    istio: bool = False
    ingress_nginx: bool = False
    linkerd: bool = False
    traefik: bool = False
    prometheus: bool = False
    opencost: bool = False
    strimzi: bool = False
    postgres_operator: bool = False
    solr_operator: bool = False
    reflector: bool = False

    # ACME registration email, enables the letsencrypt ClusterIssuer
    acme_email: str | None = None
    # zones external-dns is allowed to manage
    dns_domains: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_dependencies(self) -> "AddonsConfig":
        if self.opencost and not self.prometheus:
            raise ValueError("opencost add-on requires the prometheus add-on")
        if self.acme_email and not self.cert_manager:
            raise ValueError("acme_email is set but the cert-manager add-on is disabled")
        return self

    def is_enabled(self, addon: str) -> bool:
        field = addon.replace("-", "_")
        if field not in type(self).model_fields:
            raise KeyError(f"unknown add-on {addon!r}")
        return bool(getattr(self, field))
