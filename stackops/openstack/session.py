"""Authenticated access to OpenStack services through the Keystone v3 API."""

from __future__ import annotations

import logging
import ssl
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import requests
from requests.adapters import HTTPAdapter

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 10.0
RESOURCE_NOT_FOUND = "Resource not found"
_AUTH_METHOD = "password"


class OpenStackError(Exception):
    """Raised when an OpenStack API call fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(OpenStackError, LookupError):
    """Raised when a requested OpenStack resource does not exist."""


class Availability(str, Enum):
    """Endpoint interfaces known to the service catalog."""

    ADMIN = "admin"
    INTERNAL = "internal"
    PUBLIC = "public"


def get_availability(endpoint_interface: str) -> Availability:
    """Map an endpoint interface name to its ``Availability``."""
    try:
        return Availability(endpoint_interface)
    except ValueError:
        raise ValueError(f"endpoint interface {endpoint_interface} not known") from None


@dataclass
class TLSConfig:
    """TLS settings for talking to the cloud."""

    ca_certs: list[str] = field(default_factory=list)
    insecure: bool = False
    client_cert: str = ""
    client_key: str = ""


@dataclass
class AuthScope:
    """An explicit authorization scope for the token."""

    project_id: str = ""
    project_name: str = ""
    domain_id: str = ""
    domain_name: str = ""
    system: bool = False


@dataclass
class AuthOpts:
    """Credentials and connection settings for a cloud."""

    auth_url: str
    username: str = ""
    password: str = ""
    tenant_name: str = ""
    tenant_id: str = ""
    domain_name: str = ""
    region: str = ""
    scope: AuthScope | None = None
    tls: TLSConfig | None = None


def _identity_v3_url(auth_url: str) -> str:
    base = auth_url.rstrip("/")
    if base.endswith("/v3"):
        return base + "/"
    return base + "/v3/"


def _with_slash(url: str) -> str:
    return url if url.endswith("/") else url + "/"


def _scope_body(opts: AuthOpts) -> dict[str, Any] | None:
    scope = opts.scope
    if scope is not None:
        if scope.project_id:
            return {"project": {"id": scope.project_id}}
        if scope.project_name:
            project: dict[str, Any] = {"name": scope.project_name}
            if scope.domain_id:
                project["domain"] = {"id": scope.domain_id}
            elif scope.domain_name:
                project["domain"] = {"name": scope.domain_name}
            return {"project": project}
        if scope.domain_id:
            return {"domain": {"id": scope.domain_id}}
        if scope.domain_name:
            return {"domain": {"name": scope.domain_name}}
        if scope.system:
            return {"system": {"all": True}}
        return None
    if opts.tenant_id:
        return {"project": {"id": opts.tenant_id}}
    if opts.tenant_name:
        project = {"name": opts.tenant_name}
        if opts.domain_name:
            project["domain"] = {"name": opts.domain_name}
        return {"project": project}
    return None


class ProviderClient:
    """Holds the session, token and service catalog of an authenticated user."""

    def __init__(
        self,
        opts: AuthOpts,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self.opts = opts
        self.identity_endpoint = _identity_v3_url(opts.auth_url)
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.token: str | None = None
        self.catalog: list[dict[str, Any]] = []

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["X-Auth-Token"] = self.token
        try:
            response = self.session.request(
                method, url, headers=headers, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as exc:
            raise OpenStackError(f"{method} {url}: {exc}") from exc
        if response.status_code == 404:
            raise NotFoundError(f"{RESOURCE_NOT_FOUND}: {method} {url}", 404)
        if response.status_code >= 400:
            raise OpenStackError(
                f"{method} {url} failed with status {response.status_code}: {response.text}",
                response.status_code,
            )
        return response

    def authenticate(self) -> str:
        """Obtain a token with password credentials and store the catalog."""
        opts = self.opts
        user: dict[str, Any] = {"name": opts.username}
        user[_AUTH_METHOD] = opts.password
        if opts.domain_name:
            user["domain"] = {"name": opts.domain_name}
        identity: dict[str, Any] = {"methods": [_AUTH_METHOD]}
        identity[_AUTH_METHOD] = {"user": user}
        auth: dict[str, Any] = {"identity": identity}
        scope = _scope_body(opts)
        if scope is not None:
            auth["scope"] = scope

        self.token = None
        response = self._send(
            "POST", self.identity_endpoint + "auth/tokens", json={"auth": auth}
        )
        token = response.headers.get("X-Subject-Token")
        if not token:
            raise OpenStackError("authentication response carried no token")
        self.token = token
        try:
            body = response.json()
        except ValueError:
            body = {}
        self.catalog = (body.get("token") or {}).get("catalog") or []
        return token

    def endpoint_url(
        self,
        service_type: str,
        region: str = "",
        availability: Availability | str = Availability.PUBLIC,
    ) -> str:
        """Find the catalog URL of a service type for a region and interface."""
        interface = get_availability(availability).value
        urls = [
            endpoint["url"]
            for service in self.catalog
            if service.get("type") == service_type
            for endpoint in service.get("endpoints") or []
            if endpoint.get("interface") == interface
            and (not region or region in (endpoint.get("region_id"), endpoint.get("region")))
        ]
        unique = list(dict.fromkeys(urls))
        if not unique:
            raise NotFoundError(
                f"no {interface} endpoint for service type {service_type} in region {region!r}"
            )
        if len(unique) > 1:
            raise OpenStackError(
                f"multiple {interface} endpoints for service type {service_type}: {unique}"
            )
        return _with_slash(unique[0])


class ServiceClient:
    """Sends requests to one service endpoint with the provider's token."""

    def __init__(self, provider: ProviderClient, endpoint: str) -> None:
        self.provider = provider
        self.endpoint = _with_slash(endpoint)

    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return self.endpoint + path.lstrip("/")

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: Any = None,
    ) -> Any:
        """Send a request and return the decoded JSON body, or None if empty."""
        kwargs: dict[str, Any] = {}
        if params:
            kwargs["params"] = params
        if body is not None:
            kwargs["json"] = body
        response = self.provider._send(method, self._url(path), **kwargs)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise OpenStackError(f"{method} {path}: invalid JSON response") from exc

    def list_all(
        self, path: str, key: str, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """Collect ``key`` items over all pages of a listing."""
        items: list[dict[str, Any]] = []
        page = self.request("GET", path, params) or {}
        while True:
            items.extend(page.get(key) or [])
            next_url = (page.get("links") or {}).get("next")
            if not next_url:
                return items
            page = self.request("GET", next_url) or {}


class _TLSAdapter(HTTPAdapter):
    def __init__(self, context: ssl.SSLContext, **kwargs: Any) -> None:
        self._context = context
        super().__init__(**kwargs)

    def init_poolmanager(self, *args: Any, **kwargs: Any) -> None:
        kwargs["ssl_context"] = self._context
        super().init_poolmanager(*args, **kwargs)

    def proxy_manager_for(self, proxy: str, **proxy_kwargs: Any) -> Any:
        proxy_kwargs["ssl_context"] = self._context
        return super().proxy_manager_for(proxy, **proxy_kwargs)


def _build_ssl_context(tls: TLSConfig) -> ssl.SSLContext:
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    if tls.ca_certs:
        for pem in tls.ca_certs:
            try:
                context.load_verify_locations(cadata=pem)
            except (ssl.SSLError, ValueError, TypeError):
                logger.debug("ignoring CA certificate that could not be parsed")
    else:
        context.load_default_certs()
    if tls.insecure:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    if tls.client_cert and tls.client_key:
        try:
            context.load_cert_chain(tls.client_cert, tls.client_key)
        except OSError as exc:
            raise OpenStackError(f"loading client certificate: {exc}") from exc
    return context


def get_openstack_provider(cfg: AuthOpts) -> ProviderClient:
    """Create an authenticated provider client from ``cfg``."""
    session = requests.Session()
    if cfg.tls is not None:
        session.mount("https://", _TLSAdapter(_build_ssl_context(cfg.tls)))
        if cfg.tls.insecure:
            session.verify = False
    provider = ProviderClient(cfg, session)
    provider.authenticate()
    return provider