# This file builds the outbound HTTP transport used to reach the sensor monitoring service.
# Timeouts are fixed for every call: 3 seconds to connect, 5 seconds to read.
# Any 4xx/5xx status, transport failure, or unreadable body becomes one MonitoringUnavailableError,
# and the status, url, and cause are only kept on the exception and in the logs.

from __future__ import annotations

import logging
from typing import Any, Final

import requests
from prometheus_client import Counter

from device_management.domain.exceptions import MonitoringUnavailableError

CONNECT_TIMEOUT_SECONDS: Final[float] = 3.0
READ_TIMEOUT_SECONDS: Final[float] = 5.0

LOGGER = logging.getLogger("monitoring")

MONITORING_CALLS_TOTAL = Counter(
    "monitoring_client_calls_total",
    "Outbound calls made to the sensor monitoring service.",
    ["operation", "outcome"],
)


def is_error_status(status_code: int) -> bool:
    """Client and server errors (4xx/5xx) count as failures; redirects are followed by the session."""

    return status_code >= 400


class MonitoringTransport:
    def __init__(self, *, base_url: str, session: requests.Session | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    @property
    def timeout(self) -> tuple[float, float]:
        return (CONNECT_TIMEOUT_SECONDS, READ_TIMEOUT_SECONDS)

    def request(self, method: str, path: str, *, operation: str) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout)
        except requests.RequestException as exc:
            self._record_failure(operation, method, url, None, exc)
            raise MonitoringUnavailableError(
                "Sensor monitoring service is unavailable.", method=method, url=url
            ) from exc

        if is_error_status(response.status_code):
            self._record_failure(operation, method, url, response.status_code, None)
            raise MonitoringUnavailableError(
                "Sensor monitoring service is unavailable.",
                method=method,
                url=url,
                status_code=response.status_code,
            )

        MONITORING_CALLS_TOTAL.labels(operation=operation, outcome="success").inc()
        return response

    def request_json(self, method: str, path: str, *, operation: str) -> dict[str, Any]:
        response = self.request(method, path, operation=operation)
        url = f"{self.base_url}{path}"
        try:
            payload = response.json()
        except ValueError as exc:
            LOGGER.warning("monitoring returned invalid JSON method=%s url=%s", method, url)
            raise MonitoringUnavailableError(
                "Sensor monitoring service returned an unreadable response.",
                method=method,
                url=url,
                status_code=response.status_code,
            ) from exc

        if not isinstance(payload, dict):
            LOGGER.warning("monitoring returned unexpected payload shape method=%s url=%s", method, url)
            raise MonitoringUnavailableError(
                "Sensor monitoring service returned an unreadable response.",
                method=method,
                url=url,
                status_code=response.status_code,
            )
        return payload

    @staticmethod
    def _record_failure(
        operation: str,
        method: str,
        url: str,
        status_code: int | None,
        error: Exception | None,
    ) -> None:
        MONITORING_CALLS_TOTAL.labels(operation=operation, outcome="failure").inc()
        LOGGER.warning(
            "monitoring call failed operation=%s method=%s url=%s status=%s error=%s",
            operation,
            method,
            url,
            status_code if status_code is not None else "no-response",
            repr(error) if error is not None else None,
        )


def build_monitoring_transport(
    base_url: str, *, session: requests.Session | None = None
) -> MonitoringTransport:
    """Create the transport bound to the configured monitoring base address."""

    return MonitoringTransport(base_url=base_url, session=session)
