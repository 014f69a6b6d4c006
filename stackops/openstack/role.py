"""Keystone role management and role assignments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from stackops.openstack.session import NotFoundError, ServiceClient

logger = logging.getLogger(__name__)

ROLE_NOT_FOUND = "role not found in keystone"


@dataclass
class Role:
    """A role known by name."""

    name: str


class RoleMixin:
    """Role operations for an identity client."""

    client: ServiceClient

    def create_role(self, role_name: str) -> str:
        """Return the ID of the named role, creating it when it does not exist."""
        try:
            return self.get_role(role_name)["id"]
        except NotFoundError as exc:
            if ROLE_NOT_FOUND not in str(exc):
                raise

        created = self.client.request("POST", "roles", body={"role": {"name": role_name}})
        role = created["role"]
        logger.info("Role Created - Rolename %s, ID %s", role.get("name", role_name), role["id"])
        return role["id"]

    def get_role(self, role_name: str) -> dict[str, Any]:
        """Return the first role with this name."""
        params = {"name": role_name} if role_name else None
        found = self.client.list_all("roles", "roles", params)
        if not found:
            raise NotFoundError(f"{role_name} {ROLE_NOT_FOUND}")
        return found[0]

    def _assign(self, role_name: str, user_id: str, scope: str, scope_id: str) -> None:
        role = self.get_role(role_name)
        params = {f"scope.{scope}.id": scope_id, "user.id": user_id, "role.id": role["id"]}
        params = {key: value for key, value in params.items() if value}
        assignments = self.client.list_all("role_assignments", "role_assignments", params)
        if assignments:
            return
        logger.info(
            "Assigning userID %s to role %s - %s", user_id, role.get("name", ""), role["id"]
        )
        self.client.request(
            "PUT", f"{scope}s/{scope_id}/users/{user_id}/roles/{role['id']}"
        )

    def assign_user_role(self, role_name: str, user_id: str, project_id: str) -> None:
        """Give the user the named role on a project unless already assigned."""
        self._assign(role_name, user_id, "project", project_id)

    def assign_user_domain_role(self, role_name: str, user_id: str, domain_id: str) -> None:
        """Give the user the named role on a domain unless already assigned."""
        self._assign(role_name, user_id, "domain", domain_id)