# This file defines runtime settings for the API layer in one place.
# It exists so path prefixes, pagination bounds, table names, and the monitoring address can change without code edits.
# The config loader reads environment variables and applies safe defaults for local development.
# It also validates the sensor table name to prevent unsafe SQL identifier usage.

from __future__ import annotations

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from device_management.api.db_access import DatabaseClient


class ApiConfig(BaseModel):
    """Typed API runtime configuration."""

    model_config = ConfigDict(extra="ignore")

    api_name: str = "Sensor Device Management API"
    api_prefix: str = "/api"
    schema_version: str = "1.0.0"
    host: str = "0.0.0.0"
    port: int = 8080
    environment: str = "local"
    database_url: str
    monitoring_base_url: str = "http://localhost:8082"
    default_page_size: int = 20
    max_page_size: int = 200
    default_sort_order: str = "id:asc"
    sensor_table_name: str = "sensors"
    enable_request_logging: bool = False
    request_log_table_name: str = "api_request_log"
    allowed_origins: list[str] = Field(default_factory=list)
    app_version: str = "0.1.0"

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("api_prefix must start with '/'.")
        return value.rstrip("/")

    @field_validator("sensor_table_name", "request_log_table_name")
    @classmethod
    def validate_identifier(cls, value: str) -> str:
        return DatabaseClient.validate_identifier(value)

    @field_validator("default_page_size", "max_page_size")
    @classmethod
    def validate_positive_ints(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Value must be greater than 0.")
        return value

    @field_validator("monitoring_base_url")
    @classmethod
    def validate_monitoring_base_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("monitoring_base_url must be an http(s) URL.")
        return value.rstrip("/")

    @model_validator(mode="after")
    def validate_page_bounds(self) -> ApiConfig:
        if self.default_page_size > self.max_page_size:
            raise ValueError("default_page_size cannot exceed max_page_size.")
        return self


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "y", "on"}:
        return True
    if value in {"0", "false", "no", "n", "off"}:
        return False
    raise ValueError(f"{name} must be boolean-like, got {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


def _env_list(name: str, default: list[str] | None = None) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default or [])
    return [item.strip() for item in raw.split(",") if item.strip()]


def load_api_config(*, load_env: bool = True) -> ApiConfig:
    """Load API configuration from `.env` and process environment."""

    if load_env:
        load_dotenv()

    config_values: dict[str, object] = {
        "api_name": os.getenv("API_NAME", "Sensor Device Management API"),
        "api_prefix": os.getenv("API_PREFIX", "/api"),
        "schema_version": os.getenv("API_SCHEMA_VERSION", "1.0.0"),
        "host": os.getenv("API_HOST", "0.0.0.0"),
        "port": _env_int("API_PORT", 8080),
        "environment": os.getenv("ENV", "local"),
        "database_url": os.getenv("DATABASE_URL", ""),
        "monitoring_base_url": os.getenv("MONITORING_BASE_URL", "http://localhost:8082"),
        "default_page_size": _env_int("API_DEFAULT_PAGE_SIZE", 20),
        "max_page_size": _env_int("API_MAX_PAGE_SIZE", 200),
        "default_sort_order": os.getenv("API_DEFAULT_SORT_ORDER", "id:asc"),
        "sensor_table_name": os.getenv("API_SENSOR_TABLE_NAME", "sensors"),
        "enable_request_logging": _env_bool("API_ENABLE_REQUEST_LOGGING", False),
        "request_log_table_name": os.getenv("API_REQUEST_LOG_TABLE_NAME", "api_request_log"),
        "allowed_origins": _env_list("API_ALLOWED_ORIGINS", []),
        "app_version": os.getenv("APP_VERSION", "0.1.0"),
    }
    if not config_values["database_url"]:
        raise RuntimeError("DATABASE_URL is required for API startup.")

    return ApiConfig.model_validate(config_values)


@lru_cache(maxsize=1)
def get_api_config() -> ApiConfig:
    """Cached accessor for API config."""

    return load_api_config()
