"""Rendering of every error kind into the standard error body.

This module is the only place that turns a :class:`ServiceError` into JSON.
"""

from __future__ import annotations

import logging
import time
import traceback
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.schemas import ErrorResponse
from services.errors import ErrorKind, ServiceError, ServiceException, route_not_found

logger = logging.getLogger(__name__)

UNKNOWN_REQUEST_ID = "unknown"


@dataclass(frozen=True)
class ErrorConfig:
    """``verbose`` adds tracebacks to error bodies; keep it off in production."""

    verbose: bool = False


def format_timestamp(moment: datetime) -> str:
    """Render ``moment`` as UTC ISO-8601 with millisecond precision and a ``Z`` suffix."""
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_error_body(
    error: ServiceError,
    *,
    request_id: Optional[str],
    path: str,
    method: str,
    now: datetime,
    config: ErrorConfig,
    stack: Optional[str] = None,
) -> Dict[str, Any]:
    body = ErrorResponse(
        timestamp=format_timestamp(now),
        request_id=request_id or UNKNOWN_REQUEST_ID,
        path=path,
        method=method,
        status=error.status_code,
        message=error.message,
        error=error.message,
        stack=stack if config.verbose else None,
    )
    return body.model_dump(by_alias=True, exclude_none=True)


def request_target(request: Request) -> str:
    """Path plus query string, as the client sent it."""
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def error_response(
    request: Request,
    error: ServiceError,
    exc: Optional[BaseException] = None,
) -> JSONResponse:
    config: ErrorConfig = getattr(request.app.state, "error_config", ErrorConfig())
    stack = "".join(traceback.format_exception(exc)) if exc is not None else None
    body = build_error_body(
        error,
        request_id=getattr(request.state, "request_id", None),
        path=request_target(request),
        method=request.method,
        now=datetime.now(timezone.utc),
        config=config,
        stack=stack,
    )

    started_at = getattr(request.state, "started_at", None)
    duration_ms = int((time.perf_counter() - started_at) * 1000) if started_at else None
    log = logger.error if error.status_code >= 500 else logger.warning
    log(
        error.message,
        extra={
            "request_id": body["requestId"],
            "method": request.method,
            "path": body["path"],
            "status": error.status_code,
            "duration_ms": duration_ms,
        },
    )
    return JSONResponse(status_code=error.status_code, content=body)


async def _service_exception_handler(request: Request, exc: ServiceException) -> JSONResponse:
    return error_response(request, exc.error, exc)


async def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code in (404, 405):
        error = route_not_found(request.method, request_target(request))
    elif exc.status_code >= 500:
        error = ServiceError(ErrorKind.internal, str(exc.detail))
    else:
        error = ServiceError(ErrorKind.validation, str(exc.detail))
    return error_response(request, error, exc)


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    message = errors[0]["msg"] if errors else "Invalid request"
    return error_response(request, ServiceError(ErrorKind.validation, message), exc)


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error while processing request", exc_info=exc)
    return error_response(
        request, ServiceError(ErrorKind.internal, "Internal Server Error"), exc
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceException, _service_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
