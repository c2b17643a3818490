# portal/core/errors.py
"""
Application error taxonomy and the request-boundary handlers that turn
errors into JSON responses.

Every error leaves the API as:
    {"success": false, "error": "<CODE>", "message": "<human readable>"}
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from tortoise.exceptions import DBConnectionError, IntegrityError, OperationalError
from tortoise.exceptions import ValidationError as FieldValidationError

logger = logging.getLogger("uvicorn.error")


class AppError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    """Missing or malformed input. Raised before any side effect."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"


class ConflictError(AppError):
    """Uniqueness violation (email or phone number already taken)."""

    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"


class AuthError(AppError):
    """Bad credentials, bad/missing/wrong-role token, or RADIUS rejection."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "AUTH_ERROR"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class DependencyError(AppError):
    """The store or another backing service is unreachable."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "DEPENDENCY_ERROR"


def _error_response(err: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=err.status_code,
        content={"success": False, "error": err.code, "message": err.message},
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Only field locations are reported, never the submitted values (may contain passwords)
    fields = [".".join(str(p) for p in err.get("loc", ()) if p != "body") for err in exc.errors()]
    fields = [f for f in fields if f]
    message = "Invalid request"
    if fields:
        message = f"Invalid request: {', '.join(fields)}"
    return _error_response(ValidationError(message))


async def field_validation_handler(request: Request, exc: FieldValidationError) -> JSONResponse:
    # Raised by model field validators (e.g. max_length) before the row is written
    logger.info("[store] %s %s rejected a field value", request.method, request.url.path)
    return _error_response(ValidationError("Invalid request: field value too long or malformed"))


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("[store] %s %s hit a constraint: %s", request.method, request.url.path, exc)
    return _error_response(ConflictError("Record already exists"))


async def store_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("[store] %s %s failed: %s", request.method, request.url.path, exc)
    return _error_response(DependencyError("Data store unavailable"))


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error mapping to the FastAPI application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(FieldValidationError, field_validation_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(DBConnectionError, store_error_handler)
    app.add_exception_handler(OperationalError, store_error_handler)
