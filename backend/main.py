# =============================================================================
# backend/main.py - FastAPI Application
# =============================================================================
# Builds the application: body parsing, mode-dependent middleware, the API
# route table, the docs endpoint, error handlers, static files and the root
# response.
#
# Usage:
#   poetry run uvicorn backend.main:app --reload
#   poetry run hello-backend
# =============================================================================

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import APIRouter, FastAPI
from fastapi.responses import HTMLResponse

from backend.config import Settings, get_settings
from backend.constants import API_BASE_PATH, PUBLIC_DIR
from backend.exceptions import RouteError, route_error_handler, unhandled_exception_handler
from backend.middleware import (
    BodyParsingMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from backend.routers import api, docs
from backend.static import PublicFilesRoute

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Set up the root logger once for the whole process."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and shutdown."""
    settings: Settings = app.state.settings
    logger.info(f"Starting Hello Backend in {settings.NODE_ENV.value} mode")
    logger.info(f"Security headers: {'on' if settings.security_headers_enabled else 'off'}")

    yield

    logger.info("Shutting down Hello Backend")


async def root() -> HTMLResponse:
    """Root endpoint."""
    return HTMLResponse("Hello World")


def create_app(
    settings: Settings | None = None,
    *,
    api_router: APIRouter | None = None,
    static_dir: str | Path | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Validated settings. Read from the environment when omitted.
        api_router: Route table to mount at /api instead of routers.api.router
        static_dir: Directory to serve static files from instead of public/

    Returns:
        FastAPI: The assembled application
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="Hello Backend",
        version="1.0.0",
        # /api/docs serves its own static document instead
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # -------------------------------------------------------------------------
    # Middleware
    # -------------------------------------------------------------------------
    # Starlette runs the middleware added last first, so the access log sees
    # every request and the security headers land on every response,
    # including the 400s from body parsing.

    app.add_middleware(BodyParsingMiddleware, max_body_size=settings.max_body_size_bytes)

    if settings.security_headers_enabled:
        app.add_middleware(SecurityHeadersMiddleware)

    if settings.is_development:
        app.add_middleware(RequestLoggingMiddleware)

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------

    app.add_exception_handler(RouteError, route_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # -------------------------------------------------------------------------
    # Routes
    # -------------------------------------------------------------------------

    app.include_router(
        api_router if api_router is not None else api.router,
        prefix=API_BASE_PATH,
    )

    app.include_router(docs.router)

    # Only matches existing files, everything else falls through to "/"
    app.router.routes.append(PublicFilesRoute(static_dir or PUBLIC_DIR))

    app.add_api_route("/", root, methods=["GET"], response_class=HTMLResponse)

    return app


# Module-level app for `uvicorn backend.main:app`
settings = get_settings()
configure_logging(settings)
app = create_app(settings)
