"""Keystone service catalog entries."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from stackops.openstack.session import (
    RESOURCE_NOT_FOUND,
    NotFoundError,
    OpenStackError,
    ServiceClient,
)

logger = logging.getLogger(__name__)

SERVICE_NOT_FOUND = "service not found in keystone"


@dataclass
class Service:
    """A service to register in the catalog."""

    name: str
    type: str
    description: str = ""
    enabled: bool = False


def _service_body(service: Service) -> dict[str, Any]:
    body: dict[str, Any] = {"enabled": service.enabled}
    if service.type:
        body["type"] = service.type
    body["name"] = service.name
    body["description"] = service.description
    return {"service": body}


class ServiceMixin:
    """Service operations for an identity client."""

    client: ServiceClient

    def create_service(self, service: Service) -> str:
        """Return the ID of a matching service, registering it when missing."""
        try:
            return self.get_service(service.type, service.name)["id"]
        except NotFoundError as exc:
            if SERVICE_NOT_FOUND not in str(exc):
                raise

        created = self.client.request("POST", "services", body=_service_body(service))
        service_id = created["service"]["id"]
        logger.info("Service Created - Servicename %s, ID %s", service.name, service_id)
        return service_id

    def get_service(self, service_type: str, service_name: str) -> dict[str, Any]:
        """Return the first service with this type and name."""
        params = {"type": service_type, "name": service_name}
        params = {key: value for key, value in params.items() if value}
        found = self.client.list_all("services", "services", params)
        if not found:
            raise NotFoundError(f"{service_name} {SERVICE_NOT_FOUND}")
        return found[0]

    def update_service(self, service: Service, service_id: str) -> None:
        """Update type, state, name and description of a service."""
        self.client.request("PATCH", f"services/{service_id}", body=_service_body(service))

    def delete_service(self, service_id: str) -> None:
        """Delete a service; a service that is already gone is not an error."""
        logger.info("Delete service with id %s", service_id)
        try:
            self.client.request("DELETE", f"services/{service_id}")
        except OpenStackError as exc:
            if RESOURCE_NOT_FOUND not in str(exc):
                raise