"""API error handling and response helpers."""

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from utility_billing.billing.errors import BillingError, StaleChainError

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base application error."""

    def __init__(self, message: str, code: str, http_status: int = 400):
        """Initialize error."""
        self.message = message
        self.code = code
        self.http_status = http_status
        super().__init__(message)


class NotFoundError(AppError):
    """Requested entity does not exist."""

    def __init__(self, message: str = "Not found"):
        super().__init__(message, "not_found", status.HTTP_404_NOT_FOUND)


class ConflictError(AppError):
    """Entity already exists or is in a conflicting state."""

    def __init__(self, message: str = "Conflict"):
        super().__init__(message, "conflict", status.HTTP_409_CONFLICT)


class ValidationError(AppError):
    """Request is well-formed but not allowed in the current state."""

    def __init__(self, message: str = "Invalid request"):
        super().__init__(message, "validation_error", status.HTTP_400_BAD_REQUEST)


def error_response(error: AppError | BillingError) -> Dict[str, Any]:
    """Create a standardized error response."""
    return {
        "error": {
            "code": error.code,
            "message": error.message,
        }
    }


def billing_error_status(error: BillingError) -> int:
    """HTTP status for an engine error."""
    if isinstance(error, StaleChainError):
        return status.HTTP_409_CONFLICT
    return status.HTTP_400_BAD_REQUEST


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} -> {exc.code}: {exc.message}")
    return JSONResponse(status_code=exc.http_status, content=error_response(exc))


async def billing_error_handler(request: Request, exc: BillingError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} -> {exc.code}: {exc.message}")
    return JSONResponse(status_code=billing_error_status(exc), content=error_response(exc))


def register_error_handlers(app: FastAPI) -> None:
    """Render AppError and BillingError as {"error": {"code", "message"}}."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(BillingError, billing_error_handler)


__all__ = [
    "AppError",
    "NotFoundError",
    "ConflictError",
    "ValidationError",
    "error_response",
    "billing_error_status",
    "register_error_handlers",
]
