# =============================================================================
# backend/middleware/request_logging.py - Access Logging
# =============================================================================
# Logs one line per request: method, path, status, elapsed time and, when
# known, the response size. Only installed in development mode.
#
# Example line:
#   GET /api/docs 200 4.127 ms - 1043
# =============================================================================

import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

access_logger = logging.getLogger("backend.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Write an access log line for every request. Never touches the response."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self._log(request, 500, start, None)
            raise

        self._log(request, response.status_code, start, response.headers.get("content-length"))
        return response

    @staticmethod
    def _log(request: Request, status_code: int, start: float, length: str | None) -> None:
        elapsed_ms = (time.perf_counter() - start) * 1000
        access_logger.info(
            f"{request.method} {request.url.path} {status_code} "
            f"{elapsed_ms:.3f} ms - {length or '-'}"
        )
