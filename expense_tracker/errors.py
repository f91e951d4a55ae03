"""Application error taxonomy and its mapping onto JSON error responses."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .validation import ValidationSummary, collect

LOG = logging.getLogger(__name__)

GENERIC_INTERNAL_MESSAGE = "Internal server error"


class AppError(RuntimeError):
    """Base class for errors that surface to clients as ``{"error": message}``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """A field-level or business-rule check failed."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(AppError):
    """Missing, malformed, expired or forged token, or bad login credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(AppError):
    """The resource does not exist or belongs to another user."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    """The request collides with existing state (duplicates, referenced rows)."""

    status_code = status.HTTP_400_BAD_REQUEST


class InternalError(AppError):
    """Unexpected fault; the client only ever sees a generic message."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(message: str) -> dict[str, str]:
    return {"error": message}


def _validation_summary(exc: RequestValidationError) -> ValidationSummary:
    messages = []
    for error in exc.errors():
        ctx = error.get("ctx") or {}
        # Messages raised by our own validators travel unchanged in ctx["error"].
        if "error" in ctx:
            messages.append(str(ctx["error"]))
            continue
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        message = str(error.get("msg", "Invalid value"))
        messages.append(f"{location}: {message}" if location else message)
    return collect(*messages)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, InternalError):
        LOG.error("Internal error on %s %s: %s", request.method, request.url.path, exc.message, exc_info=exc)
        return JSONResponse(status_code=exc.status_code, content=error_body(GENERIC_INTERNAL_MESSAGE))
    if isinstance(exc, AuthError):
        LOG.debug("Authentication failed on %s: %s", request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(_validation_summary(exc).first or "Invalid request"),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    LOG.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(GENERIC_INTERNAL_MESSAGE),
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    LOG.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(GENERIC_INTERNAL_MESSAGE),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers translating every failure into the uniform error body."""

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)


__all__ = [
    "AppError",
    "AuthError",
    "ConflictError",
    "InternalError",
    "NotFoundError",
    "ValidationError",
    "register_exception_handlers",
]
