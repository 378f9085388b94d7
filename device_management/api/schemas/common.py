# This file defines the envelope, pagination, and error payload pieces shared by the sensor routes.

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class PaginationMetadata(BaseModel):
    page: int = Field(ge=1, description="1-based page number.")
    page_size: int = Field(ge=1)
    total_count: int = Field(ge=0, description="Number of stored sensors.")
    total_pages: int = Field(ge=0)
    sort: str = Field(description="Applied ordering as `field:asc|desc`; ties break on id.")


class EnvelopeFields(BaseModel):
    api_version: str
    schema_version: str
    request_id: str
    generated_at: datetime
    warnings: list[str] | None = None


class ErrorResponse(BaseModel):
    error_code: str = Field(
        description="SENSOR_NOT_FOUND, MONITORING_UNAVAILABLE, INVALID_SENSOR_ID, ..."
    )
    message: str
    details: Any | None = None
    request_id: str
    timestamp: datetime
