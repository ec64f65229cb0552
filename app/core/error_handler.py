"""
Error handling and sanitization

- StoreApiError → structured {"errors": [...]} body with its own status
- Anything else → logged with traceback, generic 500 returned to the client
- Stack traces are logged only, never returned outside DEBUG
"""
import logging
import traceback
from typing import Union

from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import settings
from app.core.exceptions import StoreApiError

logger = logging.getLogger(__name__)

# Patterns that indicate internal/sensitive error information
SENSITIVE_PATTERNS = [
    "password",
    "secret",
    "token",
    "credential",
    "sqlalchemy",
    "asyncpg",
    "psycopg",
    "postgresql",
    "sqlite",
    "traceback",
    "file \"",
    "line ",
    "/app/",
    "\\app\\",
]


def is_sensitive_error(message: str) -> bool:
    """Check if error message contains sensitive information."""
    message_lower = message.lower()
    return any(pattern in message_lower for pattern in SENSITIVE_PATTERNS)


def sanitize_error_message(error: Union[str, Exception]) -> str:
    """
    Sanitize an error message for safe client exposure.

    Args:
        error: The error string or exception

    Returns:
        Sanitized error message safe for client
    """
    if isinstance(error, str):
        message = error
    else:
        message = str(error)

    if settings.DEBUG:
        return message

    if is_sensitive_error(message):
        return "An internal error occurred. Please try again later."

    # Truncate very long messages
    if len(message) > 200:
        return message[:200] + "..."

    return message


def error_payload(error: StoreApiError) -> dict:
    """
    Render a StoreApiError in the Store API error envelope.

    Client errors (4xx) describe the request and are returned as raised;
    only server errors go through sanitization.
    """
    detail = error.message
    if error.status_code >= 500:
        detail = sanitize_error_message(detail)

    return {
        "errors": [
            {
                "status": str(error.status_code),
                "code": error.code,
                "title": error.__class__.__name__,
                "detail": detail,
                "meta": {"parameters": error.details},
            }
        ]
    }


async def store_api_error_handler(request: Request, exc: StoreApiError) -> JSONResponse:
    """Exception handler for StoreApiError and its subclasses."""
    if exc.status_code >= 500:
        logger.error(f"Store API error on {request.method} {request.url.path}: {exc!r}")
    else:
        logger.info(f"Rejected {request.method} {request.url.path}: {exc.code} {exc.message}")

    return JSONResponse(status_code=exc.status_code, content=error_payload(exc))


class ErrorSanitizationMiddleware(BaseHTTPMiddleware):
    """
    Catch unhandled exceptions and sanitize error responses.

    - In production: Returns generic error, logs full details
    - In development: Returns full error for debugging
    """

    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)
            return response
        except HTTPException:
            # Let FastAPI handle HTTPExceptions normally
            raise
        except Exception as e:
            error_id = f"{request.client.host if request.client else 'unknown'}-{id(e)}"
            logger.error(
                f"Unhandled exception [{error_id}]: {type(e).__name__}: {str(e)}\n"
                f"Path: {request.url.path}\n"
                f"Method: {request.method}\n"
                f"Traceback:\n{traceback.format_exc()}"
            )

            if settings.DEBUG:
                return JSONResponse(
                    status_code=500,
                    content={
                        "error": "internal_error",
                        "message": str(e),
                        "type": type(e).__name__,
                        "error_id": error_id,
                    }
                )
            return JSONResponse(
                status_code=500,
                content={
                    "error": "internal_error",
                    "message": "An unexpected error occurred. Please try again later.",
                    "error_id": error_id,
                }
            )
