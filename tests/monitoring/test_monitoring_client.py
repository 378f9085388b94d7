# This test file validates the monitoring client and its transport against fake HTTP sessions.
# It exists so outbound paths, fixed timeouts, and failure collapsing stay stable.

from __future__ import annotations

from typing import Any

import pytest
import requests
from prometheus_client import REGISTRY

from device_management.domain.exceptions import MonitoringUnavailableError
from device_management.domain.sensor import SensorId
from device_management.monitoring.client import SensorMonitoringClient
from device_management.monitoring.transport import (
    MonitoringTransport,
    build_monitoring_transport,
    is_error_status,
)

BASE_URL = "http://monitoring.test:8082"
SENSOR_ID = SensorId(0x0123_4567_89AB_CDEF)


class _FakeResponse:
    def __init__(self, *, status_code: int, payload: Any = None, invalid_json: bool = False) -> None:
        self.status_code = status_code
        self._payload = payload
        self._invalid_json = invalid_json

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("Expecting value")
        return self._payload


class _FakeSession:
    def __init__(
        self, responses: list[_FakeResponse] | None = None, raise_error: Exception | None = None
    ) -> None:
        self.responses = responses or []
        self.raise_error = raise_error
        self.calls: list[tuple[str, str, Any]] = []

    def request(self, method: str, url: str, timeout: Any) -> _FakeResponse:
        self.calls.append((method, url, timeout))
        if self.raise_error is not None:
            raise self.raise_error
        return self.responses.pop(0)


def _client(session: _FakeSession) -> SensorMonitoringClient:
    return SensorMonitoringClient(transport=build_monitoring_transport(BASE_URL + "/", session=session))


def _failure_count(operation: str) -> float:
    value = REGISTRY.get_sample_value(
        "monitoring_client_calls_total", {"operation": operation, "outcome": "failure"}
    )
    return value or 0.0


def test_operations_use_expected_verbs_paths_and_fixed_timeouts() -> None:
    session = _FakeSession(
        responses=[
            _FakeResponse(status_code=200, payload={"id": SENSOR_ID.as_text, "enabled": True}),
            _FakeResponse(status_code=204),
            _FakeResponse(status_code=204),
        ]
    )
    client = _client(session)

    detail = client.get_detail(SENSOR_ID)
    client.enable_monitoring(SENSOR_ID)
    client.disable_monitoring(SENSOR_ID)

    sensor_url = f"{BASE_URL}/sensors/{SENSOR_ID.as_text}"
    assert detail == {"id": SENSOR_ID.as_text, "enabled": True}
    assert session.calls == [
        ("GET", sensor_url, (3.0, 5.0)),
        ("PUT", f"{sensor_url}/monitoring", (3.0, 5.0)),
        ("DELETE", f"{sensor_url}/monitoring", (3.0, 5.0)),
    ]


@pytest.mark.parametrize("status_code", [400, 404, 500, 503])
def test_error_status_collapses_into_monitoring_unavailable(status_code: int) -> None:
    session = _FakeSession(responses=[_FakeResponse(status_code=status_code, payload={"x": 1})])
    before = _failure_count("enable_monitoring")

    with pytest.raises(MonitoringUnavailableError) as excinfo:
        _client(session).enable_monitoring(SENSOR_ID)

    assert excinfo.value.status_code == status_code
    assert excinfo.value.method == "PUT"
    assert str(status_code) in excinfo.value.describe()
    assert _failure_count("enable_monitoring") == before + 1


@pytest.mark.parametrize(
    "error",
    [requests.ConnectionError("refused"), requests.Timeout("read timed out")],
)
def test_transport_errors_keep_original_cause(error: Exception) -> None:
    session = _FakeSession(raise_error=error)

    with pytest.raises(MonitoringUnavailableError) as excinfo:
        _client(session).disable_monitoring(SENSOR_ID)

    assert excinfo.value.status_code is None
    assert excinfo.value.__cause__ is error
    assert "no-response" in excinfo.value.describe()


def test_unreadable_detail_payload_is_a_monitoring_failure() -> None:
    session = _FakeSession(
        responses=[
            _FakeResponse(status_code=200, invalid_json=True),
            _FakeResponse(status_code=200, payload=["not", "an", "object"]),
        ]
    )
    client = _client(session)

    with pytest.raises(MonitoringUnavailableError):
        client.get_detail(SENSOR_ID)
    with pytest.raises(MonitoringUnavailableError):
        client.get_detail(SENSOR_ID)


def test_transport_strips_trailing_slash_from_base_url() -> None:
    transport = MonitoringTransport(base_url="http://monitoring.test/", session=_FakeSession())

    assert transport.base_url == "http://monitoring.test"
    assert transport.timeout == (3.0, 5.0)


@pytest.mark.parametrize(
    ("status_code", "is_error"),
    [(200, False), (204, False), (304, False), (400, True), (404, True), (503, True)],
)
def test_only_client_and_server_errors_count_as_failures(status_code: int, is_error: bool) -> None:
    assert is_error_status(status_code) is is_error
