# This file provides dependency factories for FastAPI routes and middleware.
# It exists so the database client, monitoring client, and sensor service are created once and shared.
# Tests override these factories to swap in SQLite databases and fake monitoring sessions.

from __future__ import annotations

from functools import lru_cache

from device_management.api.api_config import ApiConfig, get_api_config
from device_management.api.db_access import DatabaseClient
from device_management.api.services.sensor_service import SensorService
from device_management.monitoring.client import SensorMonitoringClient
from device_management.monitoring.transport import build_monitoring_transport
from device_management.repositories.sensor_repository import SensorRepository


@lru_cache(maxsize=1)
def get_database_client() -> DatabaseClient:
    config = get_api_config()
    return DatabaseClient(database_url=config.database_url)


@lru_cache(maxsize=1)
def get_sensor_repository() -> SensorRepository:
    config = get_api_config()
    return SensorRepository(db=get_database_client(), table_name=config.sensor_table_name)


@lru_cache(maxsize=1)
def get_monitoring_client() -> SensorMonitoringClient:
    config = get_api_config()
    transport = build_monitoring_transport(config.monitoring_base_url)
    return SensorMonitoringClient(transport=transport)


@lru_cache(maxsize=1)
def get_sensor_service() -> SensorService:
    return SensorService(
        repository=get_sensor_repository(),
        monitoring_client=get_monitoring_client(),
    )


def get_config() -> ApiConfig:
    return get_api_config()
