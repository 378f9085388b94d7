"""
Unit tests for sensor construction and partial-update merging.
"""

from __future__ import annotations

from device_management.domain.sensor import (
    Sensor,
    SensorId,
    SensorUpdate,
    merge_sensor_update,
    new_sensor,
)


def _existing() -> Sensor:
    return Sensor(
        id=SensorId(99),
        name="Probe",
        ip="10.0.0.1",
        location="Lab",
        protocol="HTTP",
        model="P-1",
        enabled=True,
    )


def test_merge_overwrites_only_filled_fields_and_trims() -> None:
    merged = merge_sensor_update(_existing(), SensorUpdate(location="  Roof  ", model="\t"))

    assert merged.location == "Roof"
    assert merged.model == "P-1"
    assert merged.name == "Probe"
    assert merged.enabled is True
    assert merged.id == SensorId(99)


def test_merge_with_empty_update_returns_same_record() -> None:
    existing = _existing()

    assert merge_sensor_update(existing, SensorUpdate()) is existing


def test_new_sensor_is_disabled_and_trimmed() -> None:
    sensor = new_sensor(SensorUpdate(name=" Probe ", ip=None), sensor_id=SensorId(5))

    assert sensor == Sensor(id=SensorId(5), name="Probe", enabled=False)


def test_sensor_id_equality_is_by_value() -> None:
    assert SensorId(12) == SensorId(12)
    assert len({SensorId(12), SensorId(12), SensorId(13)}) == 2
    assert SensorId.parse(SensorId(12).as_text) == SensorId(12)
