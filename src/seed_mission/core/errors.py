"""Typed failures raised by the service layer.

Services never raise `HTTPException`; they raise one of the classes below
and `register_exception_handlers` maps each one onto an HTTP status with
the same `{"detail": ...}` body FastAPI uses for its own errors.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class SeedError(RuntimeError):
    """Base class for domain failures surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(SeedError):
    """The requested entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(SeedError):
    """The caller is not allowed to perform the operation.

    Raised for wrong authors, non-participants and closed profiles.
    """

    status_code = status.HTTP_403_FORBIDDEN


class ConflictError(SeedError):
    """The operation collides with existing state (duplicate nickname, full roster)."""

    status_code = status.HTTP_409_CONFLICT


class InvalidInputError(SeedError):
    """The request is well-formed but violates a business rule."""

    status_code = status.HTTP_400_BAD_REQUEST


class ExternalIOError(SeedError):
    """An external collaborator such as object storage failed."""

    status_code = status.HTTP_502_BAD_GATEWAY


async def _handle_seed_error(_request: Request, exc: SeedError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("Request failed: %s", exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error mapping for every `SeedError` subclass."""
    app.add_exception_handler(SeedError, _handle_seed_error)
