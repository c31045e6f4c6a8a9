"""Operations exposed to the HTTP layer, composing validation with the store."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, List, Mapping, Optional

from app.schemas import Reading, ReadingPage, Sensor
from datastore.memory_store import SensorStore, build_default_store
from services.errors import Err, Ok, Result, internal_error
from services.query import list_readings
from services.validation import validate_reading_payload, validate_sensor_payload

logger = logging.getLogger(__name__)


class SensorService:
    """Validates raw input and applies it to a :class:`SensorStore`."""

    def __init__(self, store: SensorStore) -> None:
        self.store = store

    def list_sensors(self, status: Optional[str] = None) -> List[Sensor]:
        return self.store.list_sensors(status)

    def get_sensor(self, sensor_id: int) -> Result[Sensor]:
        return self.store.get_sensor(sensor_id)

    def create_sensor(self, raw: Any) -> Result[Sensor]:
        validated = validate_sensor_payload(raw)
        if isinstance(validated, Err):
            return validated
        return Ok(self.store.create_sensor(validated.value))

    def update_sensor(self, sensor_id: int, raw: Any) -> Result[Sensor]:
        """Replace every field of a sensor; a missing sensor is reported before bad input."""
        existing = self.store.get_sensor(sensor_id)
        if isinstance(existing, Err):
            return existing
        validated = validate_sensor_payload(raw)
        if isinstance(validated, Err):
            return validated
        return self.store.update_sensor(sensor_id, validated.value)

    def delete_sensor(self, sensor_id: int) -> Result[Sensor]:
        return self.store.delete_sensor(sensor_id)

    def list_readings_for_sensor(self, sensor_id: int) -> Result[List[Reading]]:
        return self.store.list_readings_for_sensor(sensor_id)

    def create_reading(self, sensor_id: int, raw: Any) -> Result[Reading]:
        existing = self.store.get_sensor(sensor_id)
        if isinstance(existing, Err):
            return existing
        validated = validate_reading_payload(raw)
        if isinstance(validated, Err):
            return validated
        return self.store.create_reading(sensor_id, validated.value)

    def list_readings(self, query: Mapping[str, Optional[str]]) -> Result[ReadingPage]:
        sensors, readings = self.store.snapshot()
        return list_readings(query, sensors, readings)

    def fail(self) -> Result[None]:
        """Always fails; used to demonstrate the centralised error contract."""
        logger.warning("Simulated failure requested")
        return internal_error("Simulated failure")


@lru_cache
def build_default_service() -> SensorService:
    """Factory that wires the service with the default in-memory store."""
    return SensorService(store=build_default_store())
