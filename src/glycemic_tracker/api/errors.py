"""Exception handlers rendering application errors as JSON."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from glycemic_tracker.domain.errors import AppError

_logger = logging.getLogger(__name__)


def error_response(
    message: str, status_code: int, details: dict[str, object] | None = None
) -> JSONResponse:
    """Build the standard ``{"error": {...}}`` body."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "message": message,
                "status_code": status_code,
                "details": details or {},
            }
        },
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render an ``AppError`` with the status it carries."""
    _logger.warning(
        "Application error: %s [%s %s]",
        exc.message,
        request.method,
        request.url.path,
    )
    return error_response(exc.message, exc.status_code, exc.details)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures as invalid input."""
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    _logger.warning(
        "Validation error on %s %s: %s", request.method, request.url.path, errors
    )
    return error_response(
        "Invalid request",
        status.HTTP_400_BAD_REQUEST,
        {"validation_errors": errors},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register the application's exception handlers."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
