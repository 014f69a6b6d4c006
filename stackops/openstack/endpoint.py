"""Keystone endpoint management."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from stackops.openstack.session import Availability, ServiceClient, get_availability

logger = logging.getLogger(__name__)


def _interface(value: Availability | str) -> str:
    return value.value if isinstance(value, Availability) else str(value)


@dataclass
class Endpoint:
    """An endpoint of a registered service."""

    name: str
    service_id: str
    availability: Availability | str
    url: str


class EndpointMixin:
    """Endpoint operations for an identity client."""

    client: ServiceClient
    region: str

    def _endpoint_body(self, endpoint: Endpoint) -> dict[str, Any]:
        body = {
            "interface": _interface(endpoint.availability),
            "name": endpoint.name,
            "region": self.region,
            "service_id": endpoint.service_id,
            "url": endpoint.url,
        }
        return {key: value for key, value in body.items() if value}

    def create_endpoint(self, endpoint: Endpoint) -> str:
        """Return the ID of an existing endpoint for the service and interface, or create one."""
        existing = self.get_endpoints(endpoint.service_id, _interface(endpoint.availability))
        if existing:
            return existing[0]["id"]
        created = self.client.request(
            "POST", "endpoints", body={"endpoint": self._endpoint_body(endpoint)}
        )
        return created["endpoint"]["id"]

    def get_endpoints(
        self, service_id: str, endpoint_interface: str = ""
    ) -> list[dict[str, Any]]:
        """List the service's endpoints in this region, optionally of one interface."""
        logger.info("Getting Endpoints for service %s %s", service_id, endpoint_interface)
        params = {"service_id": service_id, "region_id": self.region}
        if endpoint_interface:
            params["interface"] = get_availability(endpoint_interface).value
        params = {key: value for key, value in params.items() if value}
        endpoints = self.client.list_all("endpoints", "endpoints", params)
        logger.info("Getting Endpoint successfully")
        return endpoints

    def delete_endpoint(self, endpoint: Endpoint) -> None:
        """Delete every endpoint registered for the service and interface."""
        logger.info("Deleting Endpoint %s %s", endpoint.name, _interface(endpoint.availability))
        for found in self.get_endpoints(endpoint.service_id, _interface(endpoint.availability)):
            self.client.request("DELETE", f"endpoints/{found['id']}")
            logger.info(
                "Deleted endpoint %s %s - %s",
                found.get("name", ""),
                found.get("interface", ""),
                found.get("url", ""),
            )

    def update_endpoint(self, endpoint: Endpoint, endpoint_id: str) -> str:
        """Update an endpoint and return its ID."""
        logger.info("Updating Endpoint %s %s", endpoint.name, _interface(endpoint.availability))
        updated = self.client.request(
            "PATCH", f"endpoints/{endpoint_id}", body={"endpoint": self._endpoint_body(endpoint)}
        )
        logger.info("Updated Endpoint %s %s", endpoint.name, _interface(endpoint.availability))
        return updated["endpoint"]["id"]