"""Keystone project management."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from stackops.openstack.session import NotFoundError, OpenStackError, ServiceClient

logger = logging.getLogger(__name__)

PROJECT_NOT_FOUND = "project not found"


@dataclass
class Project:
    """A project to create or look up within a domain."""

    name: str
    description: str = ""
    domain_id: str = ""


def _query(name: str, domain_id: str) -> dict[str, str]:
    return {key: value for key, value in (("name", name), ("domain_id", domain_id)) if value}


class ProjectMixin:
    """Project operations for an identity client."""

    client: ServiceClient

    def create_project(self, project: Project) -> str:
        """Return the ID of the named project, creating it when it does not exist."""
        found = self.client.list_all(
            "projects", "projects", _query(project.name, project.domain_id)
        )
        if len(found) == 1:
            return found[0]["id"]
        if found:
            raise OpenStackError(f'multiple projects named "{project.name}" found')

        body = {
            "name": project.name,
            "description": project.description,
            "domain_id": project.domain_id,
        }
        body = {key: value for key, value in body.items() if value}
        logger.info("Creating project %s in %s", project.name, project.domain_id)
        created = self.client.request("POST", "projects", body={"project": body})
        return created["project"]["id"]

    def get_project(self, project_name: str, domain_id: str) -> dict[str, Any]:
        """Return the single project with this name in the domain."""
        found = self.client.list_all("projects", "projects", _query(project_name, domain_id))
        if not found:
            raise NotFoundError(f"{project_name} {PROJECT_NOT_FOUND}")
        if len(found) > 1:
            raise OpenStackError(f'multiple project named "{project_name}" found')
        return found[0]