# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up a valid test environment before any imports
# - Builds apps for any running mode with a test route table mounted at /api
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# backend.main builds its module-level app (and reads settings) on import

os.environ["NODE_ENV"] = "test"
os.environ["PORT"] = "3000"
os.environ.pop("DISABLE_HELMET", None)

import pytest
from fastapi import APIRouter, status
from fastapi.responses import PlainTextResponse
from fastapi.testclient import TestClient

from backend.config import Settings, get_settings
from backend.dependencies import FormBodyDep, JsonBodyDep, SettingsDep
from backend.exceptions import RouteError
from backend.main import create_app


# =============================================================================
# Test Route Table
# =============================================================================

def build_test_router(calls: list[str]) -> APIRouter:
    """Route table with handlers that fail on purpose or echo their input."""
    router = APIRouter()

    @router.get("/missing")
    async def missing():
        calls.append("missing")
        raise RouteError(status.HTTP_404_NOT_FOUND, "X")

    @router.get("/conflict")
    async def conflict():
        calls.append("conflict")
        raise RouteError(status.HTTP_409_CONFLICT, "Already exists")

    @router.get("/boom")
    async def boom():
        calls.append("boom")
        raise RuntimeError("database password is hunter2")

    @router.post("/echo/json")
    async def echo_json(body: JsonBodyDep):
        calls.append("echo_json")
        return {"body": body}

    @router.post("/echo/form")
    async def echo_form(body: FormBodyDep):
        calls.append("echo_form")
        return {"body": body}

    @router.get("/mode")
    async def mode(settings: SettingsDep):
        return {"mode": settings.NODE_ENV.value}

    @router.get("/framed")
    async def framed():
        return PlainTextResponse("framed", headers={"X-Frame-Options": "DENY"})

    return router


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def make_settings():
    """Factory for Settings that ignores any .env file."""
    def _make(**overrides) -> Settings:
        values = {"NODE_ENV": "test", "PORT": 3000}
        values.update(overrides)
        return Settings(_env_file=None, **values)
    return _make


@pytest.fixture
def handler_calls() -> list[str]:
    """Names of the test handlers that actually ran."""
    return []


@pytest.fixture
def make_client(make_settings, handler_calls, tmp_path):
    """Factory for a TestClient around an app in the given running mode."""
    def _make(mode: str = "test", static_dir=None, **overrides) -> TestClient:
        app = create_app(
            make_settings(NODE_ENV=mode, **overrides),
            api_router=build_test_router(handler_calls),
            static_dir=static_dir or tmp_path,
        )
        # Unexpected errors should come back as 500s, not propagate
        return TestClient(app, raise_server_exceptions=False)
    return _make


@pytest.fixture
def client(make_client) -> TestClient:
    """Client for an app in test mode."""
    return make_client()


@pytest.fixture
def clear_settings_cache():
    """Make get_settings() read the environment again."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
