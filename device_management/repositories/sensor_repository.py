"""Sensor repository backed by SQLAlchemy text queries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from device_management.api.db_access import DatabaseClient
from device_management.api.pagination import PaginationSpec, SortSpec
from device_management.domain.sensor import Sensor, SensorId

SENSOR_SORT_FIELD_MAP: dict[str, str] = {
    "id": "s.id",
    "name": "s.name",
    "ip": "s.ip",
    "location": "s.location",
    "protocol": "s.protocol",
    "model": "s.model",
    "enabled": "s.enabled",
}

_SELECT_COLUMNS = "s.id, s.name, s.ip, s.location, s.protocol, s.model, s.enabled"


def to_storage_id(sensor_id: SensorId) -> int:
    """Map the unsigned 64-bit identifier onto a signed BIGINT value."""

    value = sensor_id.value
    return value - (1 << 64) if value >= 1 << 63 else value


def from_storage_id(value: int) -> SensorId:
    return SensorId(value + (1 << 64) if value < 0 else value)


@dataclass(frozen=True)
class SensorPage:
    rows: list[Sensor]
    total_count: int


class SensorRepository:
    """CRUD operations and paginated listing for sensors."""

    def __init__(self, *, db: DatabaseClient, table_name: str = "sensors") -> None:
        self.db = db
        self.table = db.validate_identifier(table_name)

    def ensure_schema(self) -> None:
        ddl = f"""
        CREATE TABLE IF NOT EXISTS {self.table} (
            id BIGINT PRIMARY KEY,
            name VARCHAR(255),
            ip VARCHAR(255),
            location VARCHAR(255),
            protocol VARCHAR(255),
            model VARCHAR(255),
            enabled BOOLEAN NOT NULL DEFAULT FALSE
        )
        """
        self.db.execute(ddl)

    def find_by_id(self, sensor_id: SensorId) -> Sensor | None:
        query = f"SELECT {_SELECT_COLUMNS} FROM {self.table} s WHERE s.id = :id"
        row = self.db.fetch_one(query, {"id": to_storage_id(sensor_id)})
        return self._to_model(row) if row is not None else None

    def save(self, sensor: Sensor) -> Sensor:
        """Insert the sensor, or overwrite every column of an existing row with the same id."""

        query = f"""
        INSERT INTO {self.table} (id, name, ip, location, protocol, model, enabled)
        VALUES (:id, :name, :ip, :location, :protocol, :model, :enabled)
        ON CONFLICT (id) DO UPDATE SET
            name = excluded.name,
            ip = excluded.ip,
            location = excluded.location,
            protocol = excluded.protocol,
            model = excluded.model,
            enabled = excluded.enabled
        """
        self.db.execute(query, self._to_params(sensor))
        return sensor

    def restore(self, sensor: Sensor) -> bool:
        """Insert the record unless a row with its id exists; returns whether it was written."""

        query = f"""
        INSERT INTO {self.table} (id, name, ip, location, protocol, model, enabled)
        VALUES (:id, :name, :ip, :location, :protocol, :model, :enabled)
        ON CONFLICT (id) DO NOTHING
        """
        return self.db.execute(query, self._to_params(sensor)) > 0

    def update_details(self, sensor: Sensor) -> bool:
        """Write the descriptive columns only; the enabled flag is left as stored."""

        query = f"""
        UPDATE {self.table}
        SET name = :name, ip = :ip, location = :location, protocol = :protocol, model = :model
        WHERE id = :id
        """
        return self.db.execute(query, self._to_params(sensor)) > 0

    def set_enabled(
        self, sensor_id: SensorId, enabled: bool, *, only_if: bool | None = None
    ) -> bool:
        """Write the enabled flag; with `only_if`, only a row currently holding that value changes."""

        params: dict[str, Any] = {"id": to_storage_id(sensor_id), "enabled": enabled}
        query = f"UPDATE {self.table} SET enabled = :enabled WHERE id = :id"
        if only_if is not None:
            query += " AND enabled = :only_if"
            params["only_if"] = only_if
        return self.db.execute(query, params) > 0

    def delete_by_id(self, sensor_id: SensorId) -> bool:
        query = f"DELETE FROM {self.table} WHERE id = :id"
        return self.db.execute(query, {"id": to_storage_id(sensor_id)}) > 0

    def count(self) -> int:
        return int(self.db.fetch_scalar(f"SELECT COUNT(*) FROM {self.table}"))

    def find_page(self, *, pagination: PaginationSpec, sort: SortSpec) -> SensorPage:
        total_count = self.count()

        order_sql = f"{SENSOR_SORT_FIELD_MAP[sort.field]} {sort.order.upper()}"
        data_query = f"""
        SELECT {_SELECT_COLUMNS}
        FROM {self.table} s
        ORDER BY {order_sql}, s.id ASC
        LIMIT :limit OFFSET :offset
        """
        rows = self.db.fetch_all(
            data_query,
            {"limit": pagination.page_size, "offset": pagination.offset},
        )
        return SensorPage(rows=[self._to_model(row) for row in rows], total_count=total_count)

    @staticmethod
    def _to_model(row: dict[str, Any]) -> Sensor:
        return Sensor(
            id=from_storage_id(int(row["id"])),
            name=row["name"],
            ip=row["ip"],
            location=row["location"],
            protocol=row["protocol"],
            model=row["model"],
            enabled=bool(row["enabled"]),
        )

    @staticmethod
    def _to_params(sensor: Sensor) -> dict[str, Any]:
        return {
            "id": to_storage_id(sensor.id),
            "name": sensor.name,
            "ip": sensor.ip,
            "location": sensor.location,
            "protocol": sensor.protocol,
            "model": sensor.model,
            "enabled": sensor.enabled,
        }
