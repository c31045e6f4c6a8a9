"""Closed error taxonomy and the result type returned by core operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, NoReturn, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Every failure a core operation can report, with its HTTP status."""

    validation = "validation"
    not_found = "not_found"
    route_not_found = "route_not_found"
    internal = "internal"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.validation: 400,
    ErrorKind.not_found: 404,
    ErrorKind.route_not_found: 404,
    ErrorKind.internal: 500,
}


@dataclass(frozen=True, slots=True)
class ServiceError:
    kind: ErrorKind
    message: str

    @property
    def status_code(self) -> int:
        return self.kind.status_code


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: ServiceError


Result = Union[Ok[T], Err]


def validation_error(message: str) -> Err:
    return Err(ServiceError(ErrorKind.validation, message))


def not_found(entity: str, identifier: object) -> Err:
    return Err(ServiceError(ErrorKind.not_found, f"{entity} with ID {identifier} not found"))


def route_not_found(method: str, path: str) -> ServiceError:
    return ServiceError(ErrorKind.route_not_found, f"Route {method} {path} not found")


def internal_error(message: str) -> Err:
    return Err(ServiceError(ErrorKind.internal, message))


class ServiceException(Exception):
    """Carries a :class:`ServiceError` across the HTTP boundary to the error handler."""

    def __init__(self, error: ServiceError) -> None:
        super().__init__(error.message)
        self.error = error


def unwrap(result: Result[T]) -> T:
    """Return the value of an ``Ok`` or raise the error of an ``Err``."""
    if isinstance(result, Err):
        raise_error(result.error)
    return result.value


def raise_error(error: ServiceError) -> NoReturn:
    raise ServiceException(error)
