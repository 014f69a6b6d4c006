"""Keystone project limits and registered (default) limits."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from stackops.openstack.session import OpenStackError, ServiceClient

logger = logging.getLogger(__name__)


def _drop_empty(pairs: dict[str, str]) -> dict[str, str]:
    return {key: value for key, value in pairs.items() if value}


@dataclass
class Limit:
    """A limit override for one resource of a service, in a project or domain."""

    service_id: str
    resource_name: str
    resource_limit: int
    region_id: str = ""
    domain_id: str = ""
    project_id: str = ""
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = _drop_empty(
            {
                "region_id": self.region_id,
                "domain_id": self.domain_id,
                "project_id": self.project_id,
                "description": self.description,
            }
        )
        body["service_id"] = self.service_id
        body["resource_name"] = self.resource_name
        body["resource_limit"] = self.resource_limit
        return body


@dataclass
class RegisteredLimit:
    """A default limit for one resource of a service, valid across projects."""

    service_id: str
    resource_name: str
    default_limit: int = 0
    region_id: str = ""
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = _drop_empty(
            {"region_id": self.region_id, "description": self.description}
        )
        body["service_id"] = self.service_id
        body["resource_name"] = self.resource_name
        body["default_limit"] = self.default_limit
        return body


class LimitsMixin:
    """Limit operations for an identity client."""

    client: ServiceClient

    def create_limit(self, limit: Limit) -> str:
        """Return the ID of the limit for the resource, creating it when missing."""
        found = self.client.list_all(
            "limits", "limits", _drop_empty({"resource_name": limit.resource_name})
        )
        if len(found) == 1:
            return found[0]["id"]
        if found:
            raise OpenStackError(f'multiple limits named "{limit.resource_name}" found')

        logger.info("Creating limit %s", limit.resource_name)
        created = self.client.request("POST", "limits", body={"limits": [limit.to_dict()]})
        return created["limits"][0]["id"]

    def create_or_update_registered_limit(self, limit: RegisteredLimit) -> str:
        """Create the registered limit, or update the default of the existing one."""
        found = self.list_registered_limits_by_resource_name(limit.resource_name)
        if len(found) == 1:
            limit_id = found[0]["id"]
            logger.info("Updating registered limit %s", limit.resource_name)
            self.client.request(
                "PATCH",
                f"registered_limits/{limit_id}",
                body={"registered_limit": {"default_limit": limit.default_limit}},
            )
            return limit_id
        if found:
            raise OpenStackError(f'multiple limits named "{limit.resource_name}" found')

        logger.info("Creating registered limit %s", limit.resource_name)
        created = self.client.request(
            "POST", "registered_limits", body={"registered_limits": [limit.to_dict()]}
        )
        return created["registered_limits"][0]["id"]

    def delete_registered_limit(self, registered_limit_id: str) -> None:
        """Delete a registered limit."""
        logger.info("Deleting registered limit %s", registered_limit_id)
        self.client.request("DELETE", f"registered_limits/{registered_limit_id}")

    def get_registered_limit(self, registered_limit_id: str) -> dict[str, Any]:
        """Fetch a registered limit by ID."""
        logger.info("Fetching registered limit %s", registered_limit_id)
        found = self.client.request("GET", f"registered_limits/{registered_limit_id}")
        return found["registered_limit"]

    def list_registered_limits_by_resource_name(
        self, resource_name: str
    ) -> list[dict[str, Any]]:
        """List registered limits for a resource name."""
        logger.info("Fetching registered limit %s", resource_name)
        return self.client.list_all(
            "registered_limits",
            "registered_limits",
            _drop_empty({"resource_name": resource_name}),
        )

    def list_registered_limits_by_service_id(self, service_id: str) -> list[dict[str, Any]]:
        """List registered limits of a service."""
        logger.info("Fetching registered limit for service %s", service_id)
        return self.client.list_all(
            "registered_limits", "registered_limits", _drop_empty({"service_id": service_id})
        )