# =============================================================================
# backend/middleware/ - Request Pipeline Middleware
# =============================================================================
# - body_parsing.py: JSON and URL-encoded body parsing (always on)
# - request_logging.py: Access log lines (development only)
# - security_headers.py: Hardening response headers (production only)
#
# Each middleware is added to the app in main.create_app().
# =============================================================================

from .body_parsing import BodyParsingMiddleware, parse_form_body, parse_json_body
from .request_logging import RequestLoggingMiddleware
from .security_headers import SecurityHeadersConfig, SecurityHeadersMiddleware

__all__ = [
    "BodyParsingMiddleware",
    "RequestLoggingMiddleware",
    "SecurityHeadersConfig",
    "SecurityHeadersMiddleware",
    "parse_form_body",
    "parse_json_body",
]
