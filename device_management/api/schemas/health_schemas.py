# This file defines response schemas for the health, readiness, and version endpoints.
# Each carries the request id and version fields so probes can be traced like sensor calls.

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class _TracedResponse(BaseModel):
    api_version: str
    schema_version: str
    request_id: str
    timestamp: datetime


class HealthResponse(_TracedResponse):
    status: str
    environment: str
    service_name: str


class ReadinessResponse(_TracedResponse):
    db_connected: bool
    sensor_store_ready: bool
    ready: bool
    database: str


class VersionResponse(_TracedResponse):
    api_prefix: str
    app_version: str
    git_commit: str | None = None
    project: str
