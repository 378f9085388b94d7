# This file defines consistent API error payloads and exception handlers.
# It exists so every endpoint returns the same error shape with request trace fields.
# Domain errors map to 404 (missing sensor) and 502 (monitoring service failure);
# remote failure details are logged and never copied into the response body.

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from device_management.domain.exceptions import MonitoringUnavailableError, SensorNotFoundError

LOGGER = logging.getLogger("api")


class APIError(Exception):
    """Request-level error type with structured API details."""

    def __init__(
        self,
        *,
        status_code: int,
        error_code: str,
        message: str,
        details: Any | None = None,
    ) -> None:
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.details = details
        super().__init__(message)


def _request_id(request: Request) -> str:
    return str(getattr(request.state, "request_id", "unknown"))


def _error_body(
    *, request: Request, error_code: str, message: str, details: Any | None = None
) -> dict[str, Any]:
    return {
        "error_code": error_code,
        "message": message,
        "details": details,
        "request_id": _request_id(request),
        "timestamp": datetime.now(tz=UTC).isoformat(),
    }


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                request=request,
                error_code=exc.error_code,
                message=exc.message,
                details=exc.details,
            ),
        )

    @app.exception_handler(SensorNotFoundError)
    async def sensor_not_found_handler(request: Request, exc: SensorNotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content=_error_body(
                request=request,
                error_code="SENSOR_NOT_FOUND",
                message=str(exc),
                details={"sensor_id": exc.sensor_id},
            ),
        )

    @app.exception_handler(MonitoringUnavailableError)
    async def monitoring_unavailable_handler(
        request: Request, exc: MonitoringUnavailableError
    ) -> JSONResponse:
        LOGGER.warning(
            "monitoring unavailable request_id=%s %s", _request_id(request), exc.describe()
        )
        return JSONResponse(
            status_code=502,
            content=_error_body(
                request=request,
                error_code="MONITORING_UNAVAILABLE",
                message="The sensor monitoring service could not complete the request.",
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=_error_body(
                request=request,
                error_code="VALIDATION_ERROR",
                message="Invalid request parameters.",
                details=jsonable_errors(exc),
            ),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                request=request,
                error_code="HTTP_ERROR",
                message=str(exc.detail),
            ),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        LOGGER.error(
            "unhandled error request_id=%s", _request_id(request), exc_info=exc
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                request=request,
                error_code="INTERNAL_SERVER_ERROR",
                message="The server encountered an unexpected error.",
            ),
        )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Drop non-serializable context (e.g. exception objects) from validation errors."""

    return [
        {key: value for key, value in error.items() if key in {"type", "loc", "msg"}}
        for error in exc.errors()
    ]
