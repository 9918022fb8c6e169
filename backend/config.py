# =============================================================================
# backend/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using
# pydantic-settings. It provides a single, immutable Settings class.
#
# Usage:
#   from backend.config import load_settings
#   settings = load_settings()
#   app = create_app(settings)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# NODE_ENV and PORT are required. If either is missing or malformed the
# process must not start: there is no meaningful default running mode.
# =============================================================================

import logging
from enum import Enum
from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class NodeEnv(str, Enum):
    """
    Running modes the application knows about.

    The values match the names of the per-environment .env files.
    """
    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


class ConfigurationError(RuntimeError):
    """Raised at startup when the environment fails validation."""


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Built once at startup and passed into the application factory.
    Instances are frozen; nothing may change them after validation.
    """

    # -------------------------------------------------------------------------
    # Required
    # -------------------------------------------------------------------------

    NODE_ENV: NodeEnv = Field(
        ...,
        description="Running mode: development, test or production"
    )

    PORT: int = Field(
        ...,
        gt=0,
        le=65535,
        description="Port the HTTP server listens on"
    )

    # -------------------------------------------------------------------------
    # Optional
    # -------------------------------------------------------------------------

    # Presence-only flag: any non-empty value turns security headers off
    DISABLE_HELMET: str | None = Field(
        default=None,
        description="Suppress security headers even in production"
    )

    HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the HTTP server to"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable verbose (DEBUG level) logging"
    )

    MAX_BODY_SIZE_KB: int = Field(
        default=100,
        ge=1,
        le=10240,
        description="Largest JSON or form body accepted, in kilobytes"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # Empty values count as unset, so NODE_ENV="" fails as missing
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def is_development(self) -> bool:
        return self.NODE_ENV is NodeEnv.DEVELOPMENT

    @property
    def is_test(self) -> bool:
        return self.NODE_ENV is NodeEnv.TEST

    @property
    def is_production(self) -> bool:
        return self.NODE_ENV is NodeEnv.PRODUCTION

    @property
    def security_headers_enabled(self) -> bool:
        """Security headers are sent in production unless DISABLE_HELMET is set."""
        return self.is_production and not self.DISABLE_HELMET

    @property
    def max_body_size_bytes(self) -> int:
        return self.MAX_BODY_SIZE_KB * 1024

    @property
    def log_level(self) -> int:
        return logging.DEBUG if self.DEBUG else logging.INFO


@lru_cache
def get_settings() -> Settings:
    """
    Get the cached Settings instance.

    The environment is only read and validated on the first call.
    Raises pydantic.ValidationError if validation fails.
    """
    return Settings()


def load_settings() -> Settings:
    """
    Load settings for process startup.

    Every failing variable is logged before giving up, so a bad deploy
    shows all of its problems at once instead of one per restart.

    Raises:
        ConfigurationError: If the environment fails validation
    """
    try:
        return get_settings()
    except ValidationError as e:
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            logger.error(f"Invalid environment variable {field}: {error['msg']}")
        raise ConfigurationError(
            f"Environment validation failed ({e.error_count()} error(s))"
        ) from e
