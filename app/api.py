"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Request, status

from app.schemas import Reading, ReadingPage, Sensor
from services.errors import not_found, unwrap
from services.sensor_service import SensorService, build_default_service
from services.validation import parse_int

router = APIRouter(prefix="/api")


def get_service() -> SensorService:
    return build_default_service()


def _sensor_id(raw_id: str) -> int:
    """Resolve a path id; anything that is not an integer cannot name a sensor."""
    try:
        return parse_int(raw_id)
    except ValueError:
        return unwrap(not_found("Sensor", raw_id))


@router.get(
    "/sensors",
    response_model=List[Sensor],
    summary="List sensors, optionally filtered by status.",
)
async def list_sensors(
    status_filter: Optional[str] = Query(None, alias="status"),
    service: SensorService = Depends(get_service),
) -> List[Sensor]:
    return service.list_sensors(status_filter)


@router.get("/sensors/{sensor_id}", response_model=Sensor, summary="Fetch one sensor.")
async def get_sensor(
    sensor_id: str,
    service: SensorService = Depends(get_service),
) -> Sensor:
    return unwrap(service.get_sensor(_sensor_id(sensor_id)))


@router.post(
    "/sensors",
    response_model=Sensor,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new sensor.",
)
async def create_sensor(
    payload: Any = Body(None),
    service: SensorService = Depends(get_service),
) -> Sensor:
    return unwrap(service.create_sensor(payload))


@router.put("/sensors/{sensor_id}", response_model=Sensor, summary="Replace a sensor.")
async def update_sensor(
    sensor_id: str,
    payload: Any = Body(None),
    service: SensorService = Depends(get_service),
) -> Sensor:
    return unwrap(service.update_sensor(_sensor_id(sensor_id), payload))


@router.delete(
    "/sensors/{sensor_id}",
    response_model=Sensor,
    summary="Delete a sensor and return the removed record.",
)
async def delete_sensor(
    sensor_id: str,
    service: SensorService = Depends(get_service),
) -> Sensor:
    return unwrap(service.delete_sensor(_sensor_id(sensor_id)))


@router.get(
    "/sensors/{sensor_id}/readings",
    response_model=List[Reading],
    summary="List every reading of one sensor.",
)
async def list_sensor_readings(
    sensor_id: str,
    service: SensorService = Depends(get_service),
) -> List[Reading]:
    return unwrap(service.list_readings_for_sensor(_sensor_id(sensor_id)))


@router.post(
    "/sensors/{sensor_id}/readings",
    response_model=Reading,
    status_code=status.HTTP_201_CREATED,
    summary="Record a reading for a sensor.",
)
async def create_reading(
    sensor_id: str,
    payload: Any = Body(None),
    service: SensorService = Depends(get_service),
) -> Reading:
    return unwrap(service.create_reading(_sensor_id(sensor_id), payload))


@router.get(
    "/readings",
    response_model=ReadingPage,
    summary="Query readings with filters and pagination.",
)
async def query_readings(
    request: Request,
    service: SensorService = Depends(get_service),
) -> ReadingPage:
    return unwrap(service.list_readings(request.query_params))


@router.get("/fail", summary="Always fails, to exercise the error contract.")
async def fail(service: SensorService = Depends(get_service)) -> None:
    unwrap(service.fail())


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
