"""Unit tests for payload and query parameter validation."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from app.schemas import SensorStatus, SensorType
from services.errors import Err, ErrorKind, Ok
from services.validation import (
    parse_int,
    parse_number,
    parse_timestamp,
    validate_list_query,
    validate_reading_payload,
    validate_sensor_payload,
)


def _error_message(result) -> str:
    assert isinstance(result, Err)
    assert result.error.kind is ErrorKind.validation
    assert result.error.status_code == 400
    return result.error.message


def test_valid_sensor_payload_ignores_extra_fields() -> None:
    result = validate_sensor_payload(
        {"location": "Field C", "type": "moisture", "status": "active", "extra": 1}
    )

    assert isinstance(result, Ok)
    assert result.value.location == "Field C"
    assert result.value.type is SensorType.moisture
    assert result.value.status is SensorStatus.active


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"type": "humidity", "status": "active"}, '"location" is required'),
        ({"location": 12, "type": "humidity", "status": "active"}, '"location" must be a string'),
        (
            {"location": "AB", "type": "humidity", "status": "active"},
            '"location" length must be at least 3 characters long',
        ),
        (
            {"location": "Barn", "type": "pressure", "status": "active"},
            '"type" must be one of [temperature, humidity, moisture]',
        ),
        (
            {"location": "Barn", "type": "humidity", "status": "broken"},
            '"status" must be one of [active, inactive]',
        ),
        ({"location": "Barn", "type": "humidity"}, '"status" is required'),
        (["not", "an", "object"], '"value" must be of type object'),
    ],
)
def test_invalid_sensor_payload_reports_first_offending_field(payload, message) -> None:
    assert _error_message(validate_sensor_payload(payload)) == message


def test_sensor_payload_checks_location_before_type() -> None:
    result = validate_sensor_payload({"location": "x", "type": "bogus", "status": "bogus"})

    assert "location" in _error_message(result)


def test_sensor_type_rejects_non_string_values() -> None:
    result = validate_sensor_payload({"location": "Barn", "type": ["temperature"], "status": "active"})

    assert _error_message(result) == '"type" must be one of [temperature, humidity, moisture]'


def test_valid_reading_payload_keeps_submitted_timestamp() -> None:
    result = validate_reading_payload({"timestamp": "2025-11-01T12:00:00Z", "value": 21})

    assert isinstance(result, Ok)
    assert result.value.timestamp == "2025-11-01T12:00:00Z"
    assert result.value.value == 21


@pytest.mark.parametrize(
    "payload",
    [
        {"timestamp": "yesterday", "value": 1.0},
        {"timestamp": 1730455200, "value": 1.0},
        {"value": 1.0},
    ],
)
def test_reading_payload_rejects_bad_timestamps(payload) -> None:
    assert "timestamp" in _error_message(validate_reading_payload(payload))


@pytest.mark.parametrize("value", ["21.5", True, None, float("nan")])
def test_reading_payload_rejects_non_numeric_values(value) -> None:
    result = validate_reading_payload({"timestamp": "2025-11-01T12:00:00Z", "value": value})

    assert _error_message(result) == "Invalid reading: value must be a number"


def test_parse_helpers_fail_fast_on_ambiguous_input() -> None:
    assert parse_int(" 7 ") == 7
    assert parse_number("-2.5e1") == -25.0

    for raw in ("2abc", "1.5", "", "1_000"):
        with pytest.raises(ValueError):
            parse_int(raw)
    for raw in ("12abc", "", "nan", "inf", "0x10", "1e999"):
        with pytest.raises(ValueError):
            parse_number(raw)


def test_parse_timestamp_normalises_to_utc() -> None:
    assert parse_timestamp("2025-11-01T12:00:00+02:00") == datetime(
        2025, 11, 1, 10, 0, tzinfo=timezone.utc
    )
    assert parse_timestamp("2025-11-01") == datetime(2025, 11, 1, tzinfo=timezone.utc)
    with pytest.raises(ValueError):
        parse_timestamp("not-a-date")


def test_list_query_defaults() -> None:
    result = validate_list_query({})

    assert isinstance(result, Ok)
    params = result.value
    assert (params.page, params.limit) == (1, 10)
    assert params.type is None
    assert params.min_value is None and params.max_value is None
    assert params.from_time is None and params.to_time is None


@pytest.mark.parametrize(
    ("query", "message"),
    [
        ({"page": "0"}, "page must be an integer greater than or equal to 1"),
        ({"page": "abc"}, "page must be an integer greater than or equal to 1"),
        ({"limit": "0"}, "limit must be between 1 and 100"),
        ({"limit": "101"}, "limit must be between 1 and 100"),
        ({"type": "bogus"}, "Invalid type: must be one of temperature, humidity, moisture"),
        ({"minValue": "abc"}, "minValue must be a number"),
        ({"maxValue": "10kg"}, "maxValue must be a number"),
        ({"minValue": "50", "maxValue": "10"}, "minValue cannot exceed maxValue"),
        ({"from": "soon"}, "Invalid date format for 'from' parameter"),
        ({"to": "later"}, "Invalid date format for 'to' parameter"),
        (
            {"from": "2025-11-02T00:00:00Z", "to": "2025-11-01T00:00:00Z"},
            "'from' cannot be later than 'to'",
        ),
    ],
)
def test_list_query_rejections(query, message) -> None:
    assert _error_message(validate_list_query(query)) == message


def test_list_query_reports_first_failure_in_fixed_order() -> None:
    both_values = validate_list_query({"minValue": "x", "maxValue": "y"})
    assert _error_message(both_values) == "minValue must be a number"

    everything = validate_list_query(
        {"page": "-1", "limit": "500", "type": "bogus", "from": "nope"}
    )
    assert _error_message(everything) == "page must be an integer greater than or equal to 1"

    limit_then_type = validate_list_query({"limit": "500", "type": "bogus"})
    assert _error_message(limit_then_type) == "limit must be between 1 and 100"


def test_list_query_treats_empty_type_as_absent() -> None:
    result = validate_list_query({"type": ""})

    assert isinstance(result, Ok)
    assert result.value.type is None


def test_reading_payload_rejects_integers_beyond_float_range() -> None:
    result = validate_reading_payload({"timestamp": "2025-11-01T10:00:00Z", "value": 10**400})

    assert _error_message(result) == "Invalid reading: value must be a number"


@pytest.mark.parametrize("raw", ["0001-01-01T00:00:00+01:00", "9999-12-31T23:59:59-01:00"])
def test_timestamps_outside_utc_range_are_invalid(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_timestamp(raw)

    assert "timestamp" in _error_message(validate_reading_payload({"timestamp": raw, "value": 1}))
    assert _error_message(validate_list_query({"from": raw})) == (
        "Invalid date format for 'from' parameter"
    )
    assert _error_message(validate_list_query({"to": raw})) == (
        "Invalid date format for 'to' parameter"
    )
