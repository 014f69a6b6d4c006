"""The OpenStack client combining all identity and block storage operations."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from stackops.openstack.domain import DomainMixin
from stackops.openstack.endpoint import EndpointMixin
from stackops.openstack.limits import LimitsMixin
from stackops.openstack.project import ProjectMixin
from stackops.openstack.role import RoleMixin
from stackops.openstack.service import ServiceMixin
from stackops.openstack.session import (
    AuthOpts,
    Availability,
    ServiceClient,
    get_availability,
    get_openstack_provider,
)
from stackops.openstack.user import UserMixin
from stackops.openstack.volume import VolumeMixin


class OpenStack(
    DomainMixin,
    EndpointMixin,
    ProjectMixin,
    RoleMixin,
    ServiceMixin,
    UserMixin,
    VolumeMixin,
    LimitsMixin,
):
    """A service client bound to a region, with the cloud's auth URL."""

    def __init__(self, client: ServiceClient, region: str = "", auth_url: str = "") -> None:
        self.client = client
        self.region = region
        self.auth_url = auth_url


def _identity_base(url: str) -> str:
    base = url.rstrip("/")
    if not base.endswith("/v3"):
        base += "/v3"
    return base + "/"


def new_openstack(cfg: AuthOpts) -> OpenStack:
    """Authenticate and return a client for the internal identity v3 endpoint."""
    provider = get_openstack_provider(cfg)
    url = provider.endpoint_url("identity", cfg.region, Availability.INTERNAL)
    return OpenStack(ServiceClient(provider, _identity_base(url)), cfg.region, cfg.auth_url)


def get_nova_openstack_client(
    cfg: AuthOpts, endpoint_opts: Mapping[str, Any] | None = None
) -> OpenStack:
    """Authenticate and return a client for the compute endpoint.

    ``endpoint_opts`` may give ``region`` and ``availability`` (public by default).
    """
    opts = dict(endpoint_opts or {})
    availability = get_availability(opts.get("availability") or Availability.PUBLIC)
    provider = get_openstack_provider(cfg)
    url = provider.endpoint_url(
        opts.get("type") or "compute", opts.get("region", ""), availability
    )
    return OpenStack(ServiceClient(provider, url), cfg.region, cfg.auth_url)