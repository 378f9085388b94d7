"""
Sensor domain records.
`Sensor` is the locally owned record; `SensorUpdate` is the sparse input applied by partial updates.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from device_management.common.id_generator import decode_tsid, encode_tsid, generate_tsid

DESCRIPTIVE_FIELDS: tuple[str, ...] = ("name", "ip", "location", "protocol", "model")


@dataclass(frozen=True)
class SensorId:
    """Value wrapper around a time-ordered sensor identifier."""

    value: int

    @classmethod
    def generate(cls) -> SensorId:
        return cls(generate_tsid())

    @classmethod
    def parse(cls, text: str) -> SensorId:
        return cls(decode_tsid(text))

    @property
    def as_text(self) -> str:
        return encode_tsid(self.value)

    def __str__(self) -> str:
        return self.as_text


@dataclass(frozen=True)
class Sensor:
    id: SensorId
    name: str | None = None
    ip: str | None = None
    location: str | None = None
    protocol: str | None = None
    model: str | None = None
    enabled: bool = False

    def with_enabled(self, enabled: bool) -> Sensor:
        return replace(self, enabled=enabled)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id.as_text,
            "name": self.name,
            "ip": self.ip,
            "location": self.location,
            "protocol": self.protocol,
            "model": self.model,
            "enabled": self.enabled,
        }


@dataclass(frozen=True)
class SensorUpdate:
    """Descriptive fields supplied by a caller; `None` means "not supplied"."""

    name: str | None = None
    ip: str | None = None
    location: str | None = None
    protocol: str | None = None
    model: str | None = None


def _trim(value: str | None) -> str | None:
    return value.strip() if value is not None else None


def _filled(value: str | None) -> str | None:
    trimmed = _trim(value)
    return trimmed or None


def new_sensor(data: SensorUpdate, *, sensor_id: SensorId | None = None) -> Sensor:
    """Build a fresh, unmonitored sensor from caller input."""

    values = {field_name: _trim(getattr(data, field_name)) for field_name in DESCRIPTIVE_FIELDS}
    return Sensor(id=sensor_id or SensorId.generate(), enabled=False, **values)


def merge_sensor_update(existing: Sensor, update: SensorUpdate) -> Sensor:
    """Overwrite only the fields that are present and non-blank in `update`."""

    changes: dict[str, str] = {}
    for field_name in DESCRIPTIVE_FIELDS:
        value = _filled(getattr(update, field_name))
        if value is not None:
            changes[field_name] = value
    if not changes:
        return existing
    return replace(existing, **changes)
