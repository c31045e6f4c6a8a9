from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.envelope import ErrorConfig, build_error_body, format_timestamp
from services.errors import (
    ErrorKind,
    Ok,
    ServiceError,
    ServiceException,
    not_found,
    route_not_found,
    unwrap,
    validation_error,
)

NOW = datetime(2025, 11, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)


def test_error_kinds_map_to_fixed_statuses() -> None:
    assert ErrorKind.validation.status_code == 400
    assert ErrorKind.not_found.status_code == 404
    assert ErrorKind.route_not_found.status_code == 404
    assert ErrorKind.internal.status_code == 500


def test_error_constructors_format_messages() -> None:
    assert not_found("Sensor", 5).error.message == "Sensor with ID 5 not found"
    assert route_not_found("GET", "/api/nope?x=1").message == "Route GET /api/nope?x=1 not found"
    assert validation_error("bad").error.kind is ErrorKind.validation


def test_unwrap_returns_value_or_raises() -> None:
    assert unwrap(Ok(3)) == 3

    with pytest.raises(ServiceException) as excinfo:
        unwrap(not_found("Sensor", 9))
    assert excinfo.value.error.kind is ErrorKind.not_found


def test_format_timestamp_uses_utc_milliseconds() -> None:
    assert format_timestamp(NOW) == "2025-11-01T10:00:00.123Z"

    plus_two = NOW.astimezone(timezone(timedelta(hours=2)))
    assert format_timestamp(plus_two) == "2025-11-01T10:00:00.123Z"


def test_error_body_duplicates_message_and_hides_stack_by_default() -> None:
    error = ServiceError(ErrorKind.validation, "limit must be between 1 and 100")

    body = build_error_body(
        error,
        request_id="a1b2c3",
        path="/api/readings?limit=0",
        method="GET",
        now=NOW,
        config=ErrorConfig(),
        stack="Traceback ...",
    )

    assert body == {
        "timestamp": "2025-11-01T10:00:00.123Z",
        "requestId": "a1b2c3",
        "path": "/api/readings?limit=0",
        "method": "GET",
        "status": 400,
        "message": "limit must be between 1 and 100",
        "error": "limit must be between 1 and 100",
    }


def test_error_body_includes_stack_in_verbose_mode() -> None:
    error = ServiceError(ErrorKind.internal, "Simulated failure")

    body = build_error_body(
        error,
        request_id=None,
        path="/api/fail",
        method="GET",
        now=NOW,
        config=ErrorConfig(verbose=True),
        stack="Traceback ...",
    )

    assert body["requestId"] == "unknown"
    assert body["status"] == 500
    assert body["stack"] == "Traceback ..."
