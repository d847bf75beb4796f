"""
Application exceptions and error handling.

Defines service exceptions and maps both service and engine exceptions to
consistent ``{"error": {...}}`` JSON responses.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from longdiv.errors import (
    DivisionEngineError,
    EngineCompleteError,
    InvalidArgumentError,
)

from .config import get_settings
from .logging import get_context_logger

logger = get_context_logger(__name__)


# Custom Exceptions

class DivisionServiceError(Exception):
    """Base exception for service errors"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class SessionNotFoundError(DivisionServiceError):
    """Raised when an engine session is not found"""

    def __init__(self, session_id: str):
        super().__init__(
            message=f"Session '{session_id}' not found",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"session_id": session_id}
        )


class ValidationError(DivisionServiceError):
    """Raised for request payloads that parse but make no sense"""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details
        )


def engine_error_status(error: DivisionEngineError) -> int:
    """HTTP status for an exception raised by the division engine"""
    if isinstance(error, EngineCompleteError):
        return status.HTTP_409_CONFLICT
    if isinstance(error, InvalidArgumentError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


# Error Response Models

def create_error_response(
    error: Exception,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    include_details: bool = True
) -> JSONResponse:
    """Create standardized error response"""

    details = getattr(error, "details", None)
    if not isinstance(details, dict):
        details = {}

    error_data: Dict[str, Any] = {
        "error": {
            "type": error.__class__.__name__,
            "message": getattr(error, "message", str(error)),
        }
    }

    if include_details:
        error_data["error"]["details"] = details

    log = logger.error if status_code >= 500 else logger.warning
    log(
        f"Error occurred: {error}",
        extra_data={
            "error_type": error.__class__.__name__,
            "status_code": status_code,
            **details,
        },
        exc_info=status_code >= 500
    )

    return JSONResponse(status_code=status_code, content=jsonable_encoder(error_data))


# Exception Handlers

async def service_error_handler(request: Request, exc: DivisionServiceError) -> JSONResponse:
    """Handle DivisionServiceError exceptions"""
    return create_error_response(exc, exc.status_code)


async def engine_error_handler(request: Request, exc: DivisionEngineError) -> JSONResponse:
    """Handle exceptions raised by the division engine"""
    return create_error_response(exc, engine_error_status(exc))


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTPException exceptions"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "type": "HTTPException",
                "message": exc.detail,
                "details": {},
            }
        }
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors"""
    errors = [
        {key: value for key, value in error.items() if key in ("loc", "msg", "type")}
        for error in exc.errors()
    ]
    logger.warning("Validation error", extra_data={"errors": errors})

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": {
                "type": "ValidationError",
                "message": "Request validation failed",
                "details": {"errors": errors},
            }
        }
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected errors"""
    logger.exception(
        "Unexpected error occurred",
        extra_data={"path": request.url.path}
    )

    # Don't expose internal errors in production
    include_details = get_settings().DEBUG
    message = str(exc) if include_details else "An internal error occurred"

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "type": "InternalServerError",
                "message": message,
                "details": {},
            }
        }
    )


def register_error_handlers(app):
    """Register error handlers with FastAPI app"""
    app.add_exception_handler(DivisionServiceError, service_error_handler)
    app.add_exception_handler(DivisionEngineError, engine_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)
