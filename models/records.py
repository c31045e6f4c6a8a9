"""Validated inputs handed from the validation layer to the store and query engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from app.schemas import SensorStatus, SensorType


@dataclass(slots=True, frozen=True)
class SensorFields:
    """Mutable fields of a sensor after validation."""

    location: str
    type: SensorType
    status: SensorStatus


@dataclass(slots=True, frozen=True)
class ReadingFields:
    """A reading payload after validation."""

    timestamp: str
    value: Union[int, float]


@dataclass(slots=True, frozen=True)
class ReadingQuery:
    """Parsed parameters of the readings query."""

    page: int = 1
    limit: int = 10
    type: Optional[SensorType] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    from_time: Optional[datetime] = None
    to_time: Optional[datetime] = None
