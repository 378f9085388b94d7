# This file builds response envelopes for API endpoints in a consistent format.
# It exists so consumers always receive version metadata and request tracing fields.
# The helpers return plain dictionaries that Pydantic response models validate at runtime.

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from device_management.api.api_config import ApiConfig


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def build_version_fields(config: ApiConfig) -> dict[str, str]:
    return {
        "api_version": config.app_version,
        "schema_version": config.schema_version,
    }


def build_list_envelope(
    *,
    config: ApiConfig,
    request_id: str,
    data: list[dict[str, Any]],
    pagination: dict[str, Any],
    warnings: list[str] | None = None,
) -> dict[str, Any]:
    """Build standard list response envelope."""

    return {
        **build_version_fields(config),
        "request_id": request_id,
        "generated_at": utc_now(),
        "data": data,
        "pagination": pagination,
        "warnings": warnings,
    }


def build_object_envelope(
    *,
    config: ApiConfig,
    request_id: str,
    data: dict[str, Any] | None,
    warnings: list[str] | None = None,
) -> dict[str, Any]:
    """Build standard single-object response envelope."""

    return {
        **build_version_fields(config),
        "request_id": request_id,
        "generated_at": utc_now(),
        "data": data,
        "warnings": warnings,
    }
