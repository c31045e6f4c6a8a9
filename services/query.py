"""Filtering and pagination of readings."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Iterable, List, Mapping, Optional, Sequence, Set

from app.schemas import Reading, ReadingPage, Sensor, SensorType
from models.records import ReadingQuery
from services.errors import Err, Ok, Result
from services.validation import parse_timestamp, validate_list_query


def sensor_ids_of_type(sensors: Iterable[Sensor], sensor_type: SensorType) -> Set[int]:
    return {sensor.id for sensor in sensors if sensor.type == sensor_type}


def _within(moment: datetime, start: Optional[datetime], end: Optional[datetime]) -> bool:
    if start is not None and moment < start:
        return False
    return end is None or moment <= end


def filter_readings(
    query: ReadingQuery,
    sensors: Sequence[Sensor],
    readings: Sequence[Reading],
) -> List[Reading]:
    """Apply the type, value and time filters, preserving reading order."""
    filtered = list(readings)

    if query.type is not None:
        matching_ids = sensor_ids_of_type(sensors, query.type)
        filtered = [reading for reading in filtered if reading.sensor_id in matching_ids]

    if query.min_value is not None:
        filtered = [reading for reading in filtered if reading.value >= query.min_value]
    if query.max_value is not None:
        filtered = [reading for reading in filtered if reading.value <= query.max_value]

    if query.from_time is not None or query.to_time is not None:
        filtered = [
            reading
            for reading in filtered
            if _within(parse_timestamp(reading.timestamp), query.from_time, query.to_time)
        ]

    return filtered


def paginate(items: Sequence[Reading], page: int, limit: int) -> ReadingPage:
    """Slice one page out of ``items``; pages past the end are empty, not errors."""
    total_items = len(items)
    total_pages = math.ceil(total_items / limit) if total_items else 0

    results: List[Reading] = []
    if 0 < page <= total_pages:
        start = (page - 1) * limit
        results = list(items[start : start + limit])

    return ReadingPage(
        page=page,
        page_size=limit,
        total_items=total_items,
        total_pages=total_pages,
        has_next=total_pages > 0 and page < total_pages,
        has_prev=total_pages > 0 and page > 1,
        results=results,
    )


def list_readings(
    query: Mapping[str, Optional[str]],
    sensors: Sequence[Sensor],
    readings: Sequence[Reading],
) -> Result[ReadingPage]:
    """Validate raw query parameters, filter ``readings`` and return one page."""
    parsed = validate_list_query(query)
    if isinstance(parsed, Err):
        return parsed
    params = parsed.value
    filtered = filter_readings(params, sensors, readings)
    return Ok(paginate(filtered, params.page, params.limit))
