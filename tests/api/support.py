# This file provides shared helpers for API and service tests.
# It exists so tests can swap the database and monitoring service for local fakes.
# The helpers build consistent config objects, SQLite-backed repositories, and scoped TestClient contexts.

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from fastapi.testclient import TestClient

from device_management.api.api_config import ApiConfig
from device_management.api.app import app
from device_management.api.db_access import DatabaseClient
from device_management.api.dependencies import (
    get_config,
    get_database_client,
    get_sensor_repository,
    get_sensor_service,
)
from device_management.api.services.sensor_service import SensorService
from device_management.domain.exceptions import MonitoringUnavailableError
from device_management.domain.sensor import SensorId
from device_management.repositories.sensor_repository import SensorRepository


def build_test_config(*, database_url: str = "sqlite+pysqlite:///:memory:") -> ApiConfig:
    """Create deterministic API config for tests."""

    return ApiConfig(
        api_name="Test Sensor API",
        api_prefix="/api",
        schema_version="1.0.0",
        host="0.0.0.0",
        port=8080,
        environment="test",
        database_url=database_url,
        monitoring_base_url="http://monitoring.test:8082",
        default_page_size=2,
        max_page_size=5,
        default_sort_order="id:asc",
        sensor_table_name="sensors",
        enable_request_logging=False,
        request_log_table_name="api_request_log",
        allowed_origins=[],
        app_version="0.1.0",
    )


class FakeDBClient:
    """Simple fake DB dependency for health/readiness endpoint tests."""

    def __init__(self, *, connected: bool = True, existing_tables: set[str] | None = None) -> None:
        self._connected = connected
        self._tables = existing_tables if existing_tables is not None else {"sensors"}

    def can_connect(self) -> bool:
        return self._connected

    def table_exists(self, table_name: str) -> bool:
        return self._connected and table_name in self._tables

    def log_request(self, **_: Any) -> None:
        return None


class FakeMonitoringClient:
    """Records monitoring calls and fails the operations listed in `fail_on`."""

    def __init__(
        self,
        *,
        fail_on: set[str] | None = None,
        detail: dict[str, Any] | None = None,
    ) -> None:
        self.fail_on = set(fail_on or set())
        self.detail = detail if detail is not None else {"lastTemperature": 21.5, "enabled": True}
        self.calls: list[tuple[str, str]] = []

    def get_detail(self, sensor_id: SensorId) -> dict[str, Any]:
        self._record("get_detail", sensor_id)
        return {"id": sensor_id.as_text, **self.detail}

    def enable_monitoring(self, sensor_id: SensorId) -> None:
        self._record("enable_monitoring", sensor_id)

    def disable_monitoring(self, sensor_id: SensorId) -> None:
        self._record("disable_monitoring", sensor_id)

    def operations(self) -> list[str]:
        return [operation for operation, _ in self.calls]

    def _record(self, operation: str, sensor_id: SensorId) -> None:
        self.calls.append((operation, sensor_id.as_text))
        if operation in self.fail_on:
            raise MonitoringUnavailableError(
                "Sensor monitoring service is unavailable.",
                method="PUT",
                url=f"http://monitoring.test:8082/sensors/{sensor_id.as_text}/monitoring",
                status_code=503,
            )


def build_sqlite_repository(tmp_path: Path) -> SensorRepository:
    """Create a sensor repository on a fresh SQLite file database."""

    db = DatabaseClient(database_url=f"sqlite+pysqlite:///{tmp_path / 'sensors.db'}")
    repository = SensorRepository(db=db, table_name="sensors")
    repository.ensure_schema()
    return repository


def build_sqlite_service(
    tmp_path: Path, monitoring_client: FakeMonitoringClient | None = None
) -> SensorService:
    return SensorService(
        repository=build_sqlite_repository(tmp_path),
        monitoring_client=monitoring_client or FakeMonitoringClient(),
    )


@contextmanager
def api_test_client(
    *,
    config: ApiConfig | None = None,
    db_client: Any | None = None,
    sensor_service: SensorService | Any | None = None,
) -> Iterator[TestClient]:
    """Yield a TestClient with scoped dependency overrides."""

    resolved_config = config or build_test_config()

    app.dependency_overrides[get_config] = lambda: resolved_config
    if db_client is not None:
        app.dependency_overrides[get_database_client] = lambda: db_client
    if sensor_service is not None:
        app.dependency_overrides[get_sensor_service] = lambda: sensor_service
        repository = getattr(sensor_service, "repository", None)
        if repository is not None:
            app.dependency_overrides[get_sensor_repository] = lambda: repository

    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
