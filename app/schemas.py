"""Pydantic schemas for sensors, readings and API envelopes."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SensorType(str, Enum):
    """Kinds of measurement a sensor can report."""

    temperature = "temperature"
    humidity = "humidity"
    moisture = "moisture"


class SensorStatus(str, Enum):
    active = "active"
    inactive = "inactive"


class ApiModel(BaseModel):
    """Base model serialising snake_case attributes as camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Sensor(ApiModel):
    """A simulated IoT device."""

    id: int = Field(..., ge=1)
    location: str
    type: SensorType
    status: SensorStatus


class Reading(ApiModel):
    """A single timestamped measurement attributed to one sensor."""

    id: int = Field(..., ge=1)
    sensor_id: int
    timestamp: str = Field(..., description="ISO-8601 timestamp as submitted.")
    value: Union[int, float]


class ReadingPage(ApiModel):
    """Pagination envelope returned by the readings query."""

    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1, le=100)
    total_items: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)
    has_next: bool
    has_prev: bool
    results: List[Reading] = Field(default_factory=list)


class ErrorResponse(ApiModel):
    """Body of every failed request."""

    timestamp: str
    request_id: str
    path: str
    method: str
    status: int
    message: str
    error: str
    stack: Optional[str] = Field(
        default=None, description="Traceback, only present in verbose mode."
    )
