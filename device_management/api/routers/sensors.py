# This file defines the sensor lifecycle endpoints: list, lookup, detail, create, update, delete,
# and the enable/disable pair that drives remote monitoring.
# Routers stay transport-focused; coordination with the monitoring service lives in SensorService.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Request, Response

from device_management.api.api_config import ApiConfig
from device_management.api.dependencies import get_config, get_sensor_service
from device_management.api.error_handlers import APIError
from device_management.api.pagination import compute_total_pages, normalize_pagination, parse_sort
from device_management.api.response_envelope import build_list_envelope, build_object_envelope
from device_management.api.schemas.common import ErrorResponse, PaginationMetadata
from device_management.api.schemas.sensor_schemas import (
    SensorDetailResponseV1,
    SensorInputV1,
    SensorListResponseV1,
    SensorResponseV1,
)
from device_management.api.services.sensor_service import SensorService
from device_management.domain.sensor import SensorId
from device_management.repositories.sensor_repository import SENSOR_SORT_FIELD_MAP

router = APIRouter(
    prefix="/sensors",
    tags=["sensors"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
SensorServiceDep = Annotated[SensorService, Depends(get_sensor_service)]
ConfigDep = Annotated[ApiConfig, Depends(get_config)]


def parse_sensor_id(sensor_id: Annotated[str, Path()]) -> SensorId:
    try:
        return SensorId.parse(sensor_id)
    except ValueError as exc:
        raise APIError(
            status_code=400,
            error_code="INVALID_SENSOR_ID",
            message=str(exc),
        ) from exc


SensorIdDep = Annotated[SensorId, Depends(parse_sensor_id)]


@router.get("", response_model=SensorListResponseV1)
def search_sensors(
    request: Request,
    service: SensorServiceDep,
    config: ConfigDep,
    page: int = Query(default=1, ge=1),
    page_size: int | None = Query(default=None, ge=1),
    sort: str | None = Query(default=None),
) -> dict[str, object]:
    try:
        pagination = normalize_pagination(
            page=page,
            page_size=page_size,
            default_page_size=config.default_page_size,
            max_page_size=config.max_page_size,
        )
        sort_spec = parse_sort(
            requested_sort=sort,
            default_sort=config.default_sort_order,
            allowed_fields=set(SENSOR_SORT_FIELD_MAP),
        )
    except ValueError as exc:
        raise APIError(
            status_code=400,
            error_code="INVALID_QUERY_PARAM",
            message=str(exc),
        ) from exc

    result = service.search(pagination=pagination, sort=sort_spec)

    pagination_meta = PaginationMetadata(
        page=pagination.page,
        page_size=pagination.page_size,
        total_count=result.total_count,
        total_pages=compute_total_pages(
            total_count=result.total_count,
            page_size=pagination.page_size,
        ),
        sort=sort_spec.as_text,
    )

    return build_list_envelope(
        config=config,
        request_id=request.state.request_id,
        data=[sensor.to_dict() for sensor in result.rows],
        pagination=pagination_meta.model_dump(),
    )


@router.get("/{sensor_id}", response_model=SensorResponseV1)
def get_sensor(
    request: Request,
    sensor_id: SensorIdDep,
    service: SensorServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    sensor = service.get_one(sensor_id)
    return build_object_envelope(
        config=config,
        request_id=request.state.request_id,
        data=sensor.to_dict(),
    )


@router.get("/{sensor_id}/detail", response_model=SensorDetailResponseV1)
def get_sensor_detail(
    request: Request,
    sensor_id: SensorIdDep,
    service: SensorServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    sensor, monitoring = service.get_one_with_detail(sensor_id)
    return build_object_envelope(
        config=config,
        request_id=request.state.request_id,
        data={"sensor": sensor.to_dict(), "monitoring": monitoring},
    )


@router.post("", response_model=SensorResponseV1, status_code=201)
def create_sensor(
    request: Request,
    payload: SensorInputV1,
    service: SensorServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    sensor = service.create(payload.to_update())
    return build_object_envelope(
        config=config,
        request_id=request.state.request_id,
        data=sensor.to_dict(),
    )


@router.put("/{sensor_id}", response_model=SensorResponseV1)
def update_sensor(
    request: Request,
    sensor_id: SensorIdDep,
    payload: SensorInputV1,
    service: SensorServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    sensor = service.update(sensor_id, payload.to_update())
    return build_object_envelope(
        config=config,
        request_id=request.state.request_id,
        data=sensor.to_dict(),
    )


@router.delete("/{sensor_id}", status_code=204, response_class=Response)
def delete_sensor(sensor_id: SensorIdDep, service: SensorServiceDep) -> Response:
    service.delete(sensor_id)
    return Response(status_code=204)


@router.put("/{sensor_id}/enable", status_code=204, response_class=Response)
def enable_sensor(sensor_id: SensorIdDep, service: SensorServiceDep) -> Response:
    service.enable(sensor_id)
    return Response(status_code=204)


@router.delete("/{sensor_id}/enable", status_code=204, response_class=Response)
def disable_sensor(sensor_id: SensorIdDep, service: SensorServiceDep) -> Response:
    service.disable(sensor_id)
    return Response(status_code=204)
