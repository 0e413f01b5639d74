"""Domain error taxonomy.

Services raise these; ``register_exception_handlers`` turns them into
JSON responses of the form ``{"detail": ..., "error": <kind>}``.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

logger = logging.getLogger(__name__)


class DomainError(Exception):
    """Base class for every failure a service can report."""

    kind = "error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class ValidationFailed(DomainError):
    """Input rejected before any write was attempted."""

    kind = "validation"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(DomainError):
    """A referenced row does not exist."""

    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id=None):
        self.entity = entity
        self.entity_id = entity_id
        if entity_id is None:
            super().__init__(f"{entity} not found")
        else:
            super().__init__(f"{entity} {entity_id} not found")


class Conflict(DomainError):
    """The write conflicts with current state (stale version, illegal transition, occupied table)."""

    kind = "conflict"
    status_code = status.HTTP_409_CONFLICT


class TransportError(DomainError):
    """The database could not be reached."""

    kind = "transport"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


def _error_response(exc: DomainError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": exc.kind},
    )


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    log_level = logging.ERROR if exc.status_code >= 500 else logging.INFO
    logger.log(log_level, f"{exc.kind} error on {request.method} {request.url.path}: {exc.detail}")
    return _error_response(exc)


async def operational_error_handler(request: Request, exc: OperationalError) -> JSONResponse:
    logger.error(f"Database unavailable on {request.method} {request.url.path}: {exc}")
    return _error_response(TransportError("Database unavailable, please try again"))


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain error handlers on an application."""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(OperationalError, operational_error_handler)
