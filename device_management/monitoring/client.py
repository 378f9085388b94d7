# This file implements the client for the external sensor monitoring service.
# Each operation is a single blocking call through MonitoringTransport: no retries and no caching.
# Failures of any kind surface as MonitoringUnavailableError.

from __future__ import annotations

from typing import Any

from device_management.domain.sensor import SensorId
from device_management.monitoring.transport import MonitoringTransport


class SensorMonitoringClient:
    def __init__(self, *, transport: MonitoringTransport) -> None:
        self.transport = transport

    def get_detail(self, sensor_id: SensorId) -> dict[str, Any]:
        """Fetch the live monitoring payload for a sensor; the payload is passed through untouched."""

        return self.transport.request_json(
            "GET",
            f"/sensors/{sensor_id.as_text}",
            operation="get_detail",
        )

    def enable_monitoring(self, sensor_id: SensorId) -> None:
        self.transport.request(
            "PUT",
            f"/sensors/{sensor_id.as_text}/monitoring",
            operation="enable_monitoring",
        )

    def disable_monitoring(self, sensor_id: SensorId) -> None:
        self.transport.request(
            "DELETE",
            f"/sensors/{sensor_id.as_text}/monitoring",
            operation="disable_monitoring",
        )
