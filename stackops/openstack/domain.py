"""Keystone domain management."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from stackops.openstack.session import OpenStackError, ServiceClient

logger = logging.getLogger(__name__)


@dataclass
class Domain:
    """Name and description of a domain to create or look up."""

    name: str
    description: str = ""


class DomainMixin:
    """Domain operations for an identity client."""

    client: ServiceClient

    def create_domain(self, domain: Domain) -> str:
        """Return the ID of the named domain, creating it when it does not exist."""
        found = self.client.list_all("domains", "domains", {"name": domain.name})
        if len(found) == 1:
            return found[0]["id"]
        if found:
            raise OpenStackError(f'Multiple domains named "{domain.name}" found')

        body: dict[str, str] = {"name": domain.name}
        if domain.description:
            body["description"] = domain.description
        logger.info("Creating domain %s", domain.name)
        created = self.client.request("POST", "domains", body={"domain": body})
        return created["domain"]["id"]