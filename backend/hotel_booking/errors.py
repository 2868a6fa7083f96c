"""Typed domain errors and their HTTP mapping.

Services raise these; the HTTP layer turns them into JSON responses of the
form ``{"detail": <message>, "kind": <kind>}`` so clients can branch on
``kind`` without parsing messages.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class DomainError(Exception):
    """Base class for every failure a service reports to its caller."""

    kind = "domain_error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Malformed, missing or mismatched input; the caller must correct it."""

    kind = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(DomainError):
    """A referenced entity does not exist."""

    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(DomainError):
    """Date overlap or duplicate unique field."""

    kind = "conflict"
    status_code = status.HTTP_409_CONFLICT


class InternalError(DomainError):
    """Store or transport failure."""

    kind = "internal_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


async def _domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error("Internal error on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "kind": exc.kind},
    )


async def _database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "kind": InternalError.kind},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the domain and database error handlers to ``app``."""
    app.add_exception_handler(DomainError, _domain_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _database_error_handler)  # type: ignore[arg-type]
