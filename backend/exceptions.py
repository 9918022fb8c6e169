# =============================================================================
# backend/exceptions.py - Route Errors and Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
#
# Two kinds of request-time failure exist:
# - RouteError: raised on purpose by a handler. Carries its own HTTP status
#   and a message that is safe to show to the client.
# - Anything else: unexpected. Logged with its stack and answered with a
#   generic 500 that discloses nothing.
#
# Both handlers stay quiet in test mode.
# =============================================================================

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

logger = logging.getLogger(__name__)


class RouteError(Exception):
    """
    Client-facing error raised by route handlers.

    Example:
        raise RouteError(status.HTTP_404_NOT_FOUND, "User not found")

    Produces a 404 response with the body {"error": "User not found"}.
    """

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def to_dict(self) -> dict[str, str]:
        """Convert exception to API response dict."""
        return {"error": self.message}


def should_log_errors(request: Request) -> bool:
    """Errors are recorded in every running mode except test."""
    settings = getattr(request.app.state, "settings", None)
    return settings is None or not settings.is_test


async def route_error_handler(request: Request, exc: RouteError) -> JSONResponse:
    """
    Convert RouteError to its JSON response.

    The response is sent once and handling stops here; the error is not
    passed on to the framework's default handler afterwards.
    """
    if should_log_errors(request):
        logger.error(
            f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}",
            exc_info=exc,
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def unhandled_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    """
    Handle unexpected exceptions.

    The message is logged, never returned to the client.
    """
    if should_log_errors(request):
        logger.error(f"Unexpected error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return PlainTextResponse(
        "Internal Server Error",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
