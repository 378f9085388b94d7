"""
Domain error types raised by the sensor coordinator and the monitoring client.
API error handlers translate them into HTTP responses.
"""

from __future__ import annotations


class SensorNotFoundError(LookupError):
    """Raised when no sensor record exists for the requested identifier."""

    def __init__(self, sensor_id: object) -> None:
        self.sensor_id = str(sensor_id)
        super().__init__(f"Sensor not found: {self.sensor_id}")


class MonitoringUnavailableError(RuntimeError):
    """Raised when the monitoring service fails, times out, or answers with an error status.

    Callers only ever see this single failure kind. The request details stay on the
    instance (and the original exception on `__cause__`) for logging.
    """

    def __init__(
        self,
        message: str,
        *,
        method: str,
        url: str,
        status_code: int | None = None,
    ) -> None:
        self.method = method
        self.url = url
        self.status_code = status_code
        super().__init__(message)

    def describe(self) -> str:
        status = self.status_code if self.status_code is not None else "no-response"
        cause = self.__cause__
        cause_text = f" cause={type(cause).__name__}: {cause}" if cause is not None else ""
        return f"{self.method} {self.url} status={status}{cause_text}"
