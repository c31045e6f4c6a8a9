from __future__ import annotations

import logging
from functools import lru_cache
from threading import Lock
from typing import Iterable, List, Optional, Tuple

from app.schemas import Reading, Sensor, SensorStatus, SensorType
from models.records import ReadingFields, SensorFields
from services.errors import Ok, Result, not_found
from settings import get_settings

logger = logging.getLogger(__name__)


class SensorStore:
    """In-memory sensors and readings, kept in insertion order.

    One lock guards both collections. Records are handed out as deep copies so
    callers can never mutate stored state.
    """

    def __init__(self) -> None:
        self._sensors: List[Sensor] = []
        self._readings: List[Reading] = []
        self._lock = Lock()

    def seed(self, sensors: Iterable[Sensor], readings: Iterable[Reading]) -> None:
        with self._lock:
            self._sensors.extend(sensor.model_copy(deep=True) for sensor in sensors)
            self._readings.extend(reading.model_copy(deep=True) for reading in readings)

    def list_sensors(self, status: Optional[str] = None) -> List[Sensor]:
        wanted = status.lower() if status else None
        with self._lock:
            return [
                sensor.model_copy(deep=True)
                for sensor in self._sensors
                if wanted is None or sensor.status.value.lower() == wanted
            ]

    def get_sensor(self, sensor_id: int) -> Result[Sensor]:
        with self._lock:
            sensor = self._find_sensor(sensor_id)
            if sensor is None:
                return not_found("Sensor", sensor_id)
            return Ok(sensor.model_copy(deep=True))

    def create_sensor(self, fields: SensorFields) -> Sensor:
        with self._lock:
            sensor = Sensor(
                id=max((s.id for s in self._sensors), default=0) + 1,
                location=fields.location,
                type=fields.type,
                status=fields.status,
            )
            self._sensors.append(sensor)
            created = sensor.model_copy(deep=True)
        logger.info("Sensor created", extra={"sensor_id": created.id})
        return created

    def update_sensor(self, sensor_id: int, fields: SensorFields) -> Result[Sensor]:
        with self._lock:
            sensor = self._find_sensor(sensor_id)
            if sensor is None:
                return not_found("Sensor", sensor_id)
            sensor.location = fields.location
            sensor.type = fields.type
            sensor.status = fields.status
            updated = sensor.model_copy(deep=True)
        logger.info("Sensor updated", extra={"sensor_id": sensor_id})
        return Ok(updated)

    def delete_sensor(self, sensor_id: int) -> Result[Sensor]:
        # Readings of a deleted sensor are kept.
        with self._lock:
            for index, sensor in enumerate(self._sensors):
                if sensor.id == sensor_id:
                    deleted = self._sensors.pop(index)
                    break
            else:
                return not_found("Sensor", sensor_id)
        logger.info("Sensor deleted", extra={"sensor_id": sensor_id})
        return Ok(deleted)

    def list_readings_for_sensor(self, sensor_id: int) -> Result[List[Reading]]:
        with self._lock:
            if self._find_sensor(sensor_id) is None:
                return not_found("Sensor", sensor_id)
            return Ok(
                [
                    reading.model_copy(deep=True)
                    for reading in self._readings
                    if reading.sensor_id == sensor_id
                ]
            )

    def create_reading(self, sensor_id: int, fields: ReadingFields) -> Result[Reading]:
        with self._lock:
            if self._find_sensor(sensor_id) is None:
                return not_found("Sensor", sensor_id)
            reading = Reading(
                id=max((r.id for r in self._readings), default=0) + 1,
                sensor_id=sensor_id,
                timestamp=fields.timestamp,
                value=fields.value,
            )
            self._readings.append(reading)
            created = reading.model_copy(deep=True)
        logger.info(
            "Reading created",
            extra={"sensor_id": sensor_id, "reading_id": created.id},
        )
        return Ok(created)

    def snapshot(self) -> Tuple[List[Sensor], List[Reading]]:
        """Return consistent copies of both collections taken under one lock."""

        with self._lock:
            return (
                [sensor.model_copy(deep=True) for sensor in self._sensors],
                [reading.model_copy(deep=True) for reading in self._readings],
            )

    def _find_sensor(self, sensor_id: int) -> Optional[Sensor]:
        for sensor in self._sensors:
            if sensor.id == sensor_id:
                return sensor
        return None


DEMO_SENSORS = (
    Sensor(id=1, location="Field A", type=SensorType.temperature, status=SensorStatus.active),
    Sensor(id=2, location="Field B", type=SensorType.humidity, status=SensorStatus.inactive),
)

DEMO_READINGS = (
    Reading(id=1, sensor_id=1, timestamp="2025-11-01T10:00:00Z", value=23.5),
    Reading(id=2, sensor_id=1, timestamp="2025-11-01T11:00:00Z", value=24.0),
)


@lru_cache
def build_default_store(seed_demo_data: Optional[bool] = None) -> SensorStore:
    settings = get_settings()
    should_seed = settings.seed_demo_data if seed_demo_data is None else seed_demo_data
    store = SensorStore()
    if should_seed:
        store.seed(DEMO_SENSORS, DEMO_READINGS)
    return store
