"""Keystone user management."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from stackops.openstack.session import NotFoundError, OpenStackError, ServiceClient

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "user not found in keystone"


@dataclass
class User:
    """A user with credentials and an optional default project."""

    name: str
    password: str = ""
    project_id: str = ""
    domain_id: str = ""


class UserMixin:
    """User operations for an identity client."""

    client: ServiceClient

    def _find_user(self, user_name: str, domain_id: str) -> dict[str, Any] | None:
        try:
            return self.get_user(user_name, domain_id)
        except NotFoundError as exc:
            if USER_NOT_FOUND not in str(exc):
                raise
        return None

    def create_user(self, user: User) -> str:
        """Return the ID of the named user, creating it when it does not exist."""
        existing = self._find_user(user.name, user.domain_id)
        if existing is not None:
            return existing["id"]

        body = {
            "name": user.name,
            "password": user.password,
            "domain_id": user.domain_id,
            "default_project_id": user.project_id,
        }
        body = {key: value for key, value in body.items() if value}
        created = self.client.request("POST", "users", body={"user": body})["user"]
        logger.info("User Created - Username %s, ID %s", created.get("name", user.name), created["id"])
        return created["id"]

    def get_user(self, user_name: str, domain_id: str) -> dict[str, Any]:
        """Return the single user with this name in the domain."""
        params = {"name": user_name, "domain_id": domain_id}
        params = {key: value for key, value in params.items() if value}
        found = self.client.list_all("users", "users", params)
        if not found:
            raise NotFoundError(f"{user_name} {USER_NOT_FOUND}")
        if len(found) > 1:
            raise OpenStackError(f'multiple users named "{user_name}" found')
        return found[0]

    def delete_user(self, user_name: str, domain_id: str) -> None:
        """Delete the named user; a missing user is not an error."""
        existing = self._find_user(user_name, domain_id)
        if existing is not None:
            logger.info(
                "Deleting user %s in %s", existing.get("name", user_name), existing.get("domain_id", "")
            )
            self.client.request("DELETE", f"users/{existing['id']}")
        logger.info("Deleting user successfully")