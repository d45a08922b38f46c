"""Translate exceptions into the uniform error envelope.

Every failure, whatever raised it, is answered with
``{"error": {"code", "message", "timestamp", "path"}}`` so clients can branch
on ``code`` alone. Tracebacks are logged, never returned.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from notification_server.domain.exceptions import (
    AuthenticationError,
    ImageNotFoundError,
    ImageStorageError,
    InvalidImageError,
    NotificationValidationError,
)
from notification_server.interfaces.api.schemas import ErrorDetail, ErrorResponse
from notification_server.utils import isoformat_utc

logger = logging.getLogger(__name__)

VALIDATION_ERROR = "VALIDATION_ERROR"
JSON_PARSING_ERROR = "JSON_PARSING_ERROR"
UNAUTHORIZED = "UNAUTHORIZED"
ACCESS_DENIED = "ACCESS_DENIED"
NOT_FOUND = "NOT_FOUND"
METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
INVALID_ARGUMENT = "INVALID_ARGUMENT"
SYSTEM_ERROR = "SYSTEM_ERROR"
INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"

_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: VALIDATION_ERROR,
    status.HTTP_401_UNAUTHORIZED: UNAUTHORIZED,
    status.HTTP_403_FORBIDDEN: ACCESS_DENIED,
    status.HTTP_404_NOT_FOUND: NOT_FOUND,
    status.HTTP_405_METHOD_NOT_ALLOWED: METHOD_NOT_ALLOWED,
    status.HTTP_500_INTERNAL_SERVER_ERROR: SYSTEM_ERROR,
}

_SYSTEM_ERROR_MESSAGE = "A system error occurred while processing the request"
_UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    *,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error=ErrorDetail(
            code=code,
            message=message,
            timestamp=isoformat_utc(),
            path=request.url.path,
        )
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


def _format_location(location: tuple[Any, ...]) -> str:
    parts = [str(part) for part in location if part not in ("body", "query", "path", "header")]
    return ".".join(parts) or "request"


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if any(error.get("type") == "json_invalid" for error in errors):
        logger.warning("Malformed JSON body on %s", request.url.path)
        return error_response(
            request,
            status.HTTP_400_BAD_REQUEST,
            JSON_PARSING_ERROR,
            "Invalid JSON format in request body",
        )

    details = "; ".join(
        f"{_format_location(tuple(error.get('loc', ())))}: {error.get('msg')}" for error in errors
    )
    logger.warning("Validation error on %s: %s", request.url.path, details)
    return error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        VALIDATION_ERROR,
        f"Request validation failed: {details}",
    )


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    code = _STATUS_CODES.get(exc.status_code, INVALID_ARGUMENT if exc.status_code < 500 else SYSTEM_ERROR)
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return error_response(
        request,
        exc.status_code,
        code,
        message,
        headers=getattr(exc, "headers", None),
    )


async def handle_authentication_error(
    request: Request, exc: AuthenticationError
) -> JSONResponse:
    logger.info("Unauthorized request to %s: %s", request.url.path, exc)
    return error_response(
        request,
        status.HTTP_401_UNAUTHORIZED,
        UNAUTHORIZED,
        str(exc),
        headers={"WWW-Authenticate": "Bearer"},
    )


async def handle_domain_validation_error(request: Request, exc: ValueError) -> JSONResponse:
    logger.warning("Rejected request to %s: %s", request.url.path, exc)
    return error_response(request, status.HTTP_400_BAD_REQUEST, VALIDATION_ERROR, str(exc))


async def handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
    logger.warning("Invalid argument on %s: %s", request.url.path, exc)
    return error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        INVALID_ARGUMENT,
        f"Invalid request parameter: {exc}",
    )


async def handle_not_found(request: Request, exc: ImageNotFoundError) -> JSONResponse:
    return error_response(request, status.HTTP_404_NOT_FOUND, NOT_FOUND, str(exc))


async def handle_system_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("System error on %s", request.url.path, exc_info=exc)
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        SYSTEM_ERROR,
        _SYSTEM_ERROR_MESSAGE,
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unexpected error on %s", request.url.path, exc_info=exc)
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        INTERNAL_SERVER_ERROR,
        _UNEXPECTED_ERROR_MESSAGE,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error envelope handlers on ``app``."""

    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(AuthenticationError, handle_authentication_error)
    app.add_exception_handler(NotificationValidationError, handle_domain_validation_error)
    app.add_exception_handler(InvalidImageError, handle_domain_validation_error)
    app.add_exception_handler(ValueError, handle_value_error)
    app.add_exception_handler(ImageNotFoundError, handle_not_found)
    app.add_exception_handler(SQLAlchemyError, handle_system_error)
    app.add_exception_handler(ImageStorageError, handle_system_error)
    app.add_exception_handler(OSError, handle_system_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


__all__ = [
    "error_response",
    "handle_authentication_error",
    "register_exception_handlers",
]
