# =============================================================================
# backend/server.py - Process Entry Point
# =============================================================================
# Validates the environment, configures logging and starts uvicorn.
#
# Usage:
#   poetry run hello-backend
#   poetry run python -m backend
#
# A bad environment stops the process with exit status 1 before anything
# is bound.
# =============================================================================

import logging

import uvicorn

from backend.config import ConfigurationError, load_settings

logger = logging.getLogger(__name__)


def run() -> None:
    """Start the HTTP server on HOST:PORT."""
    try:
        settings = load_settings()
    except ConfigurationError as e:
        raise SystemExit(f"Startup aborted: {e}") from e

    # Imported after validation: backend.main builds its app at import time
    from backend.main import configure_logging, create_app

    configure_logging(settings)
    logger.info(f"Listening on {settings.HOST}:{settings.PORT}")

    uvicorn.run(
        create_app(settings),
        host=settings.HOST,
        port=settings.PORT,
        log_level=logging.getLevelName(settings.log_level).lower(),
    )
