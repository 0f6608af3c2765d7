
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
import logging

logger = logging.getLogger(__name__)

class CineCircleException(Exception):
    """Base exception for the application"""
    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        self.message = message or self.message

class ActivityValidationError(CineCircleException):
    status_code = 400
    message = "Invalid payload"

class AuthenticationError(CineCircleException):
    status_code = 401
    message = "Not signed in"

class ServiceUnavailableException(CineCircleException):
    status_code = 503
    message = "Service temporarily unavailable"

class StoreUnavailableError(ServiceUnavailableException):
    """The activity store (Redis) could not be reached or rejected a command"""
    message = "Activity store unavailable"

async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all exception handler to execute last (if registered appropriately).
    Returns 500 JSON response and hides internal error details in production.
    """
    request_id = getattr(request.state, "request_id", "unknown")

    logger.error(
        "Unhandled exception occurred",
        extra={"request_id": request_id, "path": request.url.path},
        exc_info=exc
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "message": "An unexpected error occurred. Please contact support.",
            "request_id": request_id
        },
    )

async def app_exception_handler(request: Request, exc: CineCircleException):
    """
    Handle domain exceptions raised by services and repositories.
    """
    request_id = getattr(request.state, "request_id", "unknown")

    if exc.status_code >= 500:
        logger.error(exc.message, extra={"request_id": request_id, "path": request.url.path}, exc_info=exc)
    else:
        logger.info(exc.message, extra={"request_id": request_id, "path": request.url.path})

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "request_id": request_id},
    )

async def http_exception_handler(request: Request, exc: HTTPException):
    """
    Handle standard FastAPI HTTPExceptions.
    """
    request_id = getattr(request.state, "request_id", "unknown")

    # Log 5xx errors as errors, 4xx as warnings or info
    if exc.status_code >= 500:
        logger.error(f"HTTP {exc.status_code} error", extra={"request_id": request_id, "detail": exc.detail})
    else:
        logger.info(f"HTTP {exc.status_code} error", extra={"request_id": request_id, "detail": exc.detail})

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "request_id": request_id},
        headers=getattr(exc, "headers", None),
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle Pydantic validation errors. Reported as 400 like any other bad payload.
    """
    request_id = getattr(request.state, "request_id", "unknown")
    logger.info("Validation error", extra={"request_id": request_id, "errors": exc.errors()})

    return JSONResponse(
        status_code=400,
        content={
            "error": ActivityValidationError.message,
            "details": jsonable_encoder(exc.errors()),
            "request_id": request_id
        },
    )
