"""Pure validation of sensor payloads, reading payloads and query parameters.

Every function returns ``Ok`` with the validated value or ``Err`` carrying a
validation error for the first rule that fails. Nothing here touches the store.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from app.schemas import SensorStatus, SensorType
from models.records import ReadingFields, ReadingQuery, SensorFields
from services.errors import Ok, Result, validation_error

MIN_LOCATION_LENGTH = 3
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

_SENSOR_TYPE_VALUES = tuple(member.value for member in SensorType)
_SENSOR_STATUS_VALUES = tuple(member.value for member in SensorStatus)
_SENSOR_TYPES = ", ".join(_SENSOR_TYPE_VALUES)
_SENSOR_STATUSES = ", ".join(_SENSOR_STATUS_VALUES)

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def parse_int(value: str) -> int:
    """Parse a base-10 integer, rejecting fractions and trailing garbage."""
    candidate = value.strip()
    if not _INTEGER_RE.fullmatch(candidate):
        raise ValueError(f"Value {value!r} is not an integer.")
    return int(candidate, 10)


def parse_number(value: str) -> float:
    """Parse a finite decimal number; ``nan``, ``inf`` and hex forms are rejected."""
    candidate = value.strip()
    if not _NUMBER_RE.fullmatch(candidate):
        raise ValueError(f"Value {value!r} is not a number.")
    parsed = float(candidate)
    if not math.isfinite(parsed):
        raise ValueError(f"Numeric value {value!r} is not finite.")
    return parsed


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 date or date-time into an aware UTC datetime."""
    candidate = value.strip()
    if not candidate:
        raise ValueError("Timestamp is empty.")

    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError as exc:
        raise ValueError("Invalid timestamp format") from exc

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError as exc:
        raise ValueError("Timestamp is outside the supported range") from exc


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def validate_sensor_payload(raw: Any) -> Result[SensorFields]:
    if not isinstance(raw, Mapping):
        return validation_error('"value" must be of type object')

    location = raw.get("location")
    if location is None:
        return validation_error('"location" is required')
    if not isinstance(location, str):
        return validation_error('"location" must be a string')
    if len(location) < MIN_LOCATION_LENGTH:
        return validation_error(
            f'"location" length must be at least {MIN_LOCATION_LENGTH} characters long'
        )

    sensor_type = raw.get("type")
    if sensor_type is None:
        return validation_error('"type" is required')
    if sensor_type not in _SENSOR_TYPE_VALUES:
        return validation_error(f'"type" must be one of [{_SENSOR_TYPES}]')

    status = raw.get("status")
    if status is None:
        return validation_error('"status" is required')
    if status not in _SENSOR_STATUS_VALUES:
        return validation_error(f'"status" must be one of [{_SENSOR_STATUSES}]')

    return Ok(
        SensorFields(
            location=location,
            type=SensorType(sensor_type),
            status=SensorStatus(status),
        )
    )


def validate_reading_payload(raw: Any) -> Result[ReadingFields]:
    if not isinstance(raw, Mapping):
        return validation_error('"value" must be of type object')

    timestamp = raw.get("timestamp")
    if not isinstance(timestamp, str):
        return validation_error("Invalid reading: timestamp must be a valid ISO-8601 date")
    try:
        parse_timestamp(timestamp)
    except ValueError:
        return validation_error("Invalid reading: timestamp must be a valid ISO-8601 date")

    value = raw.get("value")
    if not _is_number(value):
        return validation_error("Invalid reading: value must be a number")

    return Ok(ReadingFields(timestamp=timestamp, value=value))


def validate_list_query(query: Mapping[str, Optional[str]]) -> Result[ReadingQuery]:
    """Validate readings query parameters in a fixed order, first failure wins."""
    page = DEFAULT_PAGE
    raw_page = query.get("page")
    if raw_page is not None:
        try:
            page = parse_int(raw_page)
        except ValueError:
            page = 0
        if page < 1:
            return validation_error("page must be an integer greater than or equal to 1")

    limit = DEFAULT_LIMIT
    raw_limit = query.get("limit")
    if raw_limit is not None:
        try:
            limit = parse_int(raw_limit)
        except ValueError:
            limit = 0
        if not 1 <= limit <= MAX_LIMIT:
            return validation_error(f"limit must be between 1 and {MAX_LIMIT}")

    sensor_type: Optional[SensorType] = None
    raw_type = query.get("type")
    if raw_type:
        try:
            sensor_type = SensorType(raw_type)
        except ValueError:
            return validation_error(f"Invalid type: must be one of {_SENSOR_TYPES}")

    min_value: Optional[float] = None
    raw_min = query.get("minValue")
    if raw_min is not None:
        try:
            min_value = parse_number(raw_min)
        except ValueError:
            return validation_error("minValue must be a number")

    max_value: Optional[float] = None
    raw_max = query.get("maxValue")
    if raw_max is not None:
        try:
            max_value = parse_number(raw_max)
        except ValueError:
            return validation_error("maxValue must be a number")

    if min_value is not None and max_value is not None and min_value > max_value:
        return validation_error("minValue cannot exceed maxValue")

    from_time: Optional[datetime] = None
    raw_from = query.get("from")
    if raw_from is not None:
        try:
            from_time = parse_timestamp(raw_from)
        except ValueError:
            return validation_error("Invalid date format for 'from' parameter")

    to_time: Optional[datetime] = None
    raw_to = query.get("to")
    if raw_to is not None:
        try:
            to_time = parse_timestamp(raw_to)
        except ValueError:
            return validation_error("Invalid date format for 'to' parameter")

    if from_time is not None and to_time is not None and from_time > to_time:
        return validation_error("'from' cannot be later than 'to'")

    return Ok(
        ReadingQuery(
            page=page,
            limit=limit,
            type=sensor_type,
            min_value=min_value,
            max_value=max_value,
            from_time=from_time,
            to_time=to_time,
        )
    )
