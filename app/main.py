from __future__ import annotations

import logging
import secrets
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable

from fastapi import FastAPI, Request, Response

from app.api import router
from app.envelope import ErrorConfig, register_exception_handlers, request_target
from datastore.memory_store import build_default_store
from logging_config import configure_logging
from services.sensor_service import build_default_service
from settings import get_settings

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def new_request_id() -> str:
    return secrets.token_hex(3)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    service = build_default_service()
    sensors, readings = service.store.snapshot()
    logger.info("Store ready with %d sensors and %d readings", len(sensors), len(readings))
    try:
        yield
    finally:
        build_default_service.cache_clear()
        build_default_store.cache_clear()


async def request_context(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Tag each request with a short id and log its method, target, duration and status."""
    request_id = new_request_id()
    request.state.request_id = request_id
    request.state.started_at = time.perf_counter()

    response = await call_next(request)

    duration_ms = int((time.perf_counter() - request.state.started_at) * 1000)
    response.headers[REQUEST_ID_HEADER] = request_id
    logger.info(
        "%s %s [%s] - %dms %d",
        request.method,
        request_target(request),
        request_id,
        duration_ms,
        response.status_code,
    )
    return response


def create_app() -> FastAPI:
    configure_logging()
    settings = get_settings()
    app = FastAPI(
        title="SmartFarm Sensor API",
        description="In-memory IoT sensors and readings with filtered, paginated queries.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.error_config = ErrorConfig(verbose=settings.verbose_errors)
    app.middleware("http")(request_context)
    register_exception_handlers(app)
    app.include_router(router)
    return app

app = create_app()
