"""Extra volumes and mounts, and the policy that decides which services get them."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


class PropagationType(str, Enum):
    """Well-known propagation targets; any plain string names a service too."""

    EVERYWHERE = "All"
    DB_SYNC = "DBSync"
    COMPUTE = "Compute"


class VolumeConversionError(ValueError):
    """Raised when a volume source cannot be turned into its core form."""


def can_propagate(prop: str, services: Iterable[str]) -> bool:
    """Tell whether a volume tagged with ``prop`` goes to any of ``services``."""
    if prop == PropagationType.EVERYWHERE:
        return True
    return any(prop == service for service in services)


def _key(name: str) -> dict[str, str]:
    return {"json": name}


@dataclass
class VolumeSource:
    """A reduced volume source; each field is the JSON object of that source kind."""

    host_path: dict[str, Any] | None = field(default=None, metadata=_key("hostPath"))
    empty_dir: dict[str, Any] | None = field(default=None, metadata=_key("emptyDir"))
    secret: dict[str, Any] | None = field(default=None, metadata=_key("secret"))
    nfs: dict[str, Any] | None = field(default=None, metadata=_key("nfs"))
    iscsi: dict[str, Any] | None = field(default=None, metadata=_key("iscsi"))
    persistent_volume_claim: dict[str, Any] | None = field(
        default=None, metadata=_key("persistentVolumeClaim")
    )
    cephfs: dict[str, Any] | None = field(default=None, metadata=_key("cephfs"))
    downward_api: dict[str, Any] | None = field(default=None, metadata=_key("downwardAPI"))
    fc: dict[str, Any] | None = field(default=None, metadata=_key("fc"))
    config_map: dict[str, Any] | None = field(default=None, metadata=_key("configMap"))
    scale_io: dict[str, Any] | None = field(default=None, metadata=_key("scaleIO"))
    storage_os: dict[str, Any] | None = field(default=None, metadata=_key("storageos"))
    csi: dict[str, Any] | None = field(default=None, metadata=_key("csi"))
    projected: dict[str, Any] | None = field(default=None, metadata=_key("projected"))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VolumeSource:
        return cls(
            **{
                f.name: data[f.metadata["json"]]
                for f in fields(cls)
                if data.get(f.metadata["json"]) is not None
            }
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            f.metadata["json"]: value
            for f in fields(self)
            if (value := getattr(self, f.name)) is not None
        }

    def to_core_volume_source(self) -> dict[str, Any]:
        """Return an independent copy of this source in core JSON form."""
        try:
            encoded = json.dumps(self.to_dict())
        except (TypeError, ValueError) as exc:
            raise VolumeConversionError(f"error marshalling VolumeSource: {exc}") from exc
        decoded = json.loads(encoded)
        for key, value in decoded.items():
            if not isinstance(value, dict):
                raise VolumeConversionError(
                    f"error unmarshalling VolumeSource: field {key} must be an object"
                )
        return decoded


@dataclass
class Volume:
    """A named volume with its source."""

    name: str
    volume_source: VolumeSource = field(default_factory=VolumeSource)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Volume:
        source = {key: value for key, value in data.items() if key != "name"}
        return cls(name=data["name"], volume_source=VolumeSource.from_dict(source))

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, **self.volume_source.to_dict()}

    def to_core_volume(self) -> dict[str, Any]:
        """Return this volume in core JSON form."""
        return {"name": self.name, **self.volume_source.to_core_volume_source()}


@dataclass
class VolMounts:
    """Volumes and mounts offered to pods according to a propagation policy."""

    volumes: list[Volume] = field(default_factory=list)
    mounts: list[dict[str, Any]] = field(default_factory=list)
    propagation: list[str] = field(default_factory=list)
    extra_vol_type: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VolMounts:
        return cls(
            volumes=[Volume.from_dict(v) for v in data.get("volumes") or []],
            mounts=[dict(m) for m in data.get("mounts") or []],
            propagation=list(data.get("propagation") or []),
            extra_vol_type=data.get("extraVolType", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.propagation:
            result["propagation"] = [str(getattr(p, "value", p)) for p in self.propagation]
        if self.extra_vol_type:
            result["extraVolType"] = self.extra_vol_type
        result["volumes"] = [v.to_dict() for v in self.volumes]
        result["mounts"] = list(self.mounts)
        return result

    def propagate(self, services: Iterable[str]) -> list[VolMounts]:
        """Return one entry of these volumes and mounts per matching policy.

        Without a policy the volumes go everywhere.
        """
        services = list(services)
        result: list[VolMounts] = []
        if not self.propagation:
            result.append(VolMounts(volumes=self.volumes, mounts=self.mounts))
        result.extend(
            VolMounts(volumes=self.volumes, mounts=self.mounts)
            for prop in self.propagation
            if can_propagate(prop, services)
        )
        return result