# =============================================================================
# backend/middleware/security_headers.py - Hardening Response Headers
# =============================================================================
# Adds a fixed set of security headers to every response. Installed only in
# production, and skipped there too when DISABLE_HELMET is set.
#
# The defaults mirror the usual helmet set:
# - Content-Security-Policy: restrict where scripts, styles, frames come from
# - Strict-Transport-Security: HTTPS only for a year
# - X-Content-Type-Options / X-Frame-Options: MIME sniffing, clickjacking
# - Cross-Origin-* and Origin-Agent-Cluster: process isolation
# - Referrer-Policy, X-DNS-Prefetch-Control, X-Download-Options,
#   X-Permitted-Cross-Domain-Policies, X-XSS-Protection
# =============================================================================

from dataclasses import dataclass

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

DEFAULT_CONTENT_SECURITY_POLICY = (
    "default-src 'self';base-uri 'self';font-src 'self' https: data:;"
    "form-action 'self';frame-ancestors 'self';img-src 'self' data:;"
    "object-src 'none';script-src 'self';script-src-attr 'none';"
    "style-src 'self' https: 'unsafe-inline';upgrade-insecure-requests"
)


@dataclass(frozen=True, slots=True)
class SecurityHeadersConfig:
    """
    Header values sent on every response.

    Set a field to None to leave that header out.
    """

    content_security_policy: str | None = DEFAULT_CONTENT_SECURITY_POLICY
    cross_origin_opener_policy: str | None = "same-origin"
    cross_origin_resource_policy: str | None = "same-origin"
    origin_agent_cluster: str | None = "?1"
    referrer_policy: str | None = "no-referrer"
    strict_transport_security: str | None = "max-age=31536000; includeSubDomains"
    x_content_type_options: str | None = "nosniff"
    x_dns_prefetch_control: str | None = "off"
    x_download_options: str | None = "noopen"
    x_frame_options: str | None = "SAMEORIGIN"
    x_permitted_cross_domain_policies: str | None = "none"
    x_xss_protection: str | None = "0"

    def headers(self) -> dict[str, str]:
        """Header name -> value for every configured header."""
        values = {
            "Content-Security-Policy": self.content_security_policy,
            "Cross-Origin-Opener-Policy": self.cross_origin_opener_policy,
            "Cross-Origin-Resource-Policy": self.cross_origin_resource_policy,
            "Origin-Agent-Cluster": self.origin_agent_cluster,
            "Referrer-Policy": self.referrer_policy,
            "Strict-Transport-Security": self.strict_transport_security,
            "X-Content-Type-Options": self.x_content_type_options,
            "X-DNS-Prefetch-Control": self.x_dns_prefetch_control,
            "X-Download-Options": self.x_download_options,
            "X-Frame-Options": self.x_frame_options,
            "X-Permitted-Cross-Domain-Policies": self.x_permitted_cross_domain_policies,
            "X-XSS-Protection": self.x_xss_protection,
        }
        return {name: value for name, value in values.items() if value is not None}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Add security headers to every response.

    Headers a handler already set are left alone.
    """

    def __init__(self, app, config: SecurityHeadersConfig | None = None):
        super().__init__(app)
        self.headers = (config or SecurityHeadersConfig()).headers()

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for name, value in self.headers.items():
            response.headers.setdefault(name, value)
        if "x-powered-by" in response.headers:
            del response.headers["x-powered-by"]
        return response
