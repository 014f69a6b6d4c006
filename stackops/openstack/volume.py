"""Block storage service health checks."""

from __future__ import annotations

import logging

from stackops.openstack.session import ServiceClient

logger = logging.getLogger(__name__)


class VolumeMixin:
    """Block storage operations for a volume client."""

    client: ServiceClient

    def volume_service_check(self, service_name: str) -> bool:
        """Tell whether a service whose binary contains ``service_name`` is up and enabled."""
        logger.info("Checking %s service is running or not", service_name)
        services = self.client.list_all("os-services", "services")
        return any(
            service_name in (service.get("binary") or "")
            and service.get("state") == "up"
            and service.get("status") == "enabled"
            for service in services
        )