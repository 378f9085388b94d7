# This file implements the sensor coordinator used by the sensor routes.
# Write paths that touch monitoring persist locally first, then call the monitoring service once.
# When that call fails the local write is compensated (flag restored, deleted row re-inserted)
# and MonitoringUnavailableError propagates unchanged to the caller.

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from device_management.api.pagination import PaginationSpec, SortSpec
from device_management.domain.exceptions import MonitoringUnavailableError, SensorNotFoundError
from device_management.domain.sensor import (
    Sensor,
    SensorId,
    SensorUpdate,
    merge_sensor_update,
    new_sensor,
)
from device_management.monitoring.client import SensorMonitoringClient
from device_management.repositories.sensor_repository import SensorPage, SensorRepository

LOGGER = logging.getLogger("sensors")


class SensorService:
    """Coordinates the local sensor store with the remote monitoring service."""

    def __init__(
        self,
        *,
        repository: SensorRepository,
        monitoring_client: SensorMonitoringClient,
    ) -> None:
        self.repository = repository
        self.monitoring_client = monitoring_client

    def search(self, *, pagination: PaginationSpec, sort: SortSpec) -> SensorPage:
        return self.repository.find_page(pagination=pagination, sort=sort)

    def get_one(self, sensor_id: SensorId) -> Sensor:
        sensor = self.repository.find_by_id(sensor_id)
        if sensor is None:
            raise SensorNotFoundError(sensor_id)
        return sensor

    def get_one_with_detail(self, sensor_id: SensorId) -> tuple[Sensor, dict[str, Any]]:
        sensor = self.get_one(sensor_id)
        monitoring = self.monitoring_client.get_detail(sensor_id)
        return sensor, monitoring

    def create(self, data: SensorUpdate) -> Sensor:
        sensor = self.repository.save(new_sensor(data))
        LOGGER.info("sensor created sensor_id=%s", sensor.id)
        return sensor

    def update(self, sensor_id: SensorId, data: SensorUpdate) -> Sensor:
        existing = self.get_one(sensor_id)
        merged = merge_sensor_update(existing, data)
        if merged is existing:
            return existing
        if not self.repository.update_details(merged):
            raise SensorNotFoundError(sensor_id)
        return self.get_one(sensor_id)

    def delete(self, sensor_id: SensorId) -> None:
        sensor = self.get_one(sensor_id)
        self.repository.delete_by_id(sensor_id)
        try:
            self.monitoring_client.disable_monitoring(sensor_id)
        except MonitoringUnavailableError:
            self._restore_deleted(sensor)
            raise
        LOGGER.info("sensor deleted sensor_id=%s", sensor_id)

    def enable(self, sensor_id: SensorId) -> None:
        self._set_monitoring(sensor_id, enabled=True)

    def disable(self, sensor_id: SensorId) -> None:
        self._set_monitoring(sensor_id, enabled=False)

    def _set_monitoring(self, sensor_id: SensorId, *, enabled: bool) -> None:
        previous = self.get_one(sensor_id)
        self.repository.set_enabled(sensor_id, enabled)
        try:
            if enabled:
                self.monitoring_client.enable_monitoring(sensor_id)
            else:
                self.monitoring_client.disable_monitoring(sensor_id)
        except MonitoringUnavailableError:
            self._restore_flag(previous, attempted=enabled)
            raise
        LOGGER.info("sensor monitoring updated sensor_id=%s enabled=%s", sensor_id, enabled)

    def _restore_flag(self, previous: Sensor, *, attempted: bool) -> None:
        """Put back the flag read before the failed remote call.

        Only the `enabled` column is written, and only while it still holds the attempted value,
        so descriptive fields changed in the meantime survive.
        """

        if previous.enabled == attempted:
            return
        action = "enable" if attempted else "disable"
        LOGGER.warning(
            "monitoring %s failed, restoring enabled=%s sensor_id=%s",
            action,
            previous.enabled,
            previous.id,
        )
        self._compensate(
            lambda: self.repository.set_enabled(previous.id, previous.enabled, only_if=attempted),
            sensor_id=previous.id,
            action=action,
        )

    def _restore_deleted(self, sensor: Sensor) -> None:
        LOGGER.warning("monitoring delete failed, re-inserting sensor_id=%s", sensor.id)
        self._compensate(lambda: self.repository.restore(sensor), sensor_id=sensor.id, action="delete")

    @staticmethod
    def _compensate(write: Callable[[], bool], *, sensor_id: SensorId, action: str) -> None:
        try:
            written = write()
        except SQLAlchemyError:
            # The caller still gets the monitoring failure; this line is the only trace of the drift.
            LOGGER.exception(
                "compensation failed, local record out of sync sensor_id=%s action=%s",
                sensor_id,
                action,
            )
            return
        if not written:
            LOGGER.info("compensation skipped, record changed meanwhile sensor_id=%s", sensor_id)
