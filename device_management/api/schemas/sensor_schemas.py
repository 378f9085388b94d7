# This file defines request and response schemas for the sensor endpoints.
# Inputs are sparse: every descriptive field may be omitted, and blank values are ignored on update.
# The monitoring payload is opaque, so its model accepts whatever fields the monitoring service sends.

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from device_management.api.schemas.common import EnvelopeFields, PaginationMetadata
from device_management.domain.sensor import SensorUpdate


class SensorInputV1(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(default=None, max_length=255)
    ip: str | None = Field(default=None, max_length=255)
    location: str | None = Field(default=None, max_length=255)
    protocol: str | None = Field(default=None, max_length=255)
    model: str | None = Field(default=None, max_length=255)

    @field_validator("name", "ip", "location", "protocol", "model", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        # Length limits apply to the stored, trimmed value.
        return value.strip() if isinstance(value, str) else value

    def to_update(self) -> SensorUpdate:
        return SensorUpdate(
            name=self.name,
            ip=self.ip,
            location=self.location,
            protocol=self.protocol,
            model=self.model,
        )


class SensorV1(BaseModel):
    id: str
    name: str | None = None
    ip: str | None = None
    location: str | None = None
    protocol: str | None = None
    model: str | None = None
    enabled: bool


class SensorMonitoringV1(BaseModel):
    model_config = ConfigDict(extra="allow")


class SensorDetailV1(BaseModel):
    sensor: SensorV1
    monitoring: SensorMonitoringV1


class SensorResponseV1(EnvelopeFields):
    data: SensorV1


class SensorListResponseV1(EnvelopeFields):
    data: list[SensorV1]
    pagination: PaginationMetadata


class SensorDetailResponseV1(EnvelopeFields):
    data: SensorDetailV1
