"""Ceph client settings: pool lookup, RBD user, OSD caps and monitor validation."""

from __future__ import annotations

import ipaddress
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Defaults(str, Enum):
    """Default names used when a Ceph setting is not given."""

    USER = "openstack"
    CINDER_POOL = "volumes"
    CINDER_BACKUP_POOL = "backups"
    NOVA_POOL = "vms"
    GLANCE_POOL = "images"
    ERROR = ""


class NoDefaultPoolError(LookupError):
    """Raised when a service has no configured pool and no default one."""


@dataclass(frozen=True)
class PoolSpec:
    """A Ceph pool definition."""

    pool_name: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PoolSpec:
        return cls(pool_name=data["name"])

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.pool_name}


@dataclass
class Backend:
    """Client parameters for an external Ceph cluster."""

    cluster_fsid: str
    cluster_mon_hosts: str
    client_key: str
    user: str = ""
    pools: dict[str, PoolSpec] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Backend:
        return cls(
            cluster_fsid=data["cephFsid"],
            cluster_mon_hosts=data["cephMons"],
            client_key=data["cephClientKey"],
            user=data.get("cephUser", ""),
            pools={
                name: PoolSpec.from_dict(spec)
                for name, spec in (data.get("cephPools") or {}).items()
            },
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "cephFsid": self.cluster_fsid,
            "cephMons": self.cluster_mon_hosts,
            "cephClientKey": self.client_key,
            "cephUser": self.user,
        }
        if self.pools:
            result["cephPools"] = {name: spec.to_dict() for name, spec in self.pools.items()}
        return result


_SERVICE_DEFAULT_POOLS = {
    "cinder": Defaults.CINDER_POOL,
    "backup": Defaults.CINDER_BACKUP_POOL,
    "nova": Defaults.NOVA_POOL,
    "glance": Defaults.GLANCE_POOL,
}


def get_pool(pools: Mapping[str, PoolSpec], service: str) -> str:
    """Return the pool configured for ``service``, or that service's default pool."""
    spec = pools.get(service)
    if spec is not None:
        return spec.pool_name
    try:
        return _SERVICE_DEFAULT_POOLS[service].value
    except KeyError:
        raise NoDefaultPoolError("No default pool found") from None


def get_rbd_user(user: str) -> str:
    """Return ``user``, or the default RBD user when it is empty."""
    return user or Defaults.USER.value


def get_osd_caps(pools: Mapping[str, PoolSpec]) -> str:
    """Build the OSD caps string for all pools, in sorted pool-name order."""
    names = sorted(spec.pool_name for spec in pools.values())
    caps = [f"profile rbd pool={name}" for name in names if name]
    if not caps:
        caps = [f"profile rbd pool={Defaults.CINDER_POOL.value}"]
    return ",".join(caps)


def _is_ip(text: str) -> bool:
    if "%" in text:
        return False
    try:
        ipaddress.ip_address(text)
    except ValueError:
        return False
    return True


def validate_mons(ip_list: str) -> bool:
    """Check that every entry of a comma separated monitor list is an IP address."""
    return all(_is_ip(entry.strip(" ")) for entry in ip_list.split(","))