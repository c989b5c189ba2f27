"""
Helpers shared by route modules: error conversion and API key check.
"""

from typing import Optional
from fastapi import Header
from fastapi.responses import JSONResponse
import structlog

from config.settings import settings
from exceptions import AppError, UnauthorizedError

logger = structlog.get_logger(__name__)


def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    # Unexpected error
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


async def require_api_key(x_api_key: Optional[str] = Header(None)) -> None:
    """
    Guard for write endpoints.

    Open when no API key is configured (local development).
    """
    if settings.api_key and x_api_key != settings.api_key:
        logger.warning("api_key_rejected", provided=bool(x_api_key))
        raise UnauthorizedError()
