# =============================================================================
# backend/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for values the middleware prepared.
# These are injected into route handlers using Depends().
#
# Usage:
#   @router.post("/things")
#   async def create_thing(body: JsonBodyDep):
#       ...
# =============================================================================

from typing import Annotated, Any

from fastapi import Depends, Request

from backend.config import Settings


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


def get_json_body(request: Request) -> Any:
    """
    Parsed JSON body.

    Returns None when the request did not carry a JSON content type.
    """
    return getattr(request.state, "json_body", None)


def get_form_body(request: Request) -> dict[str, Any] | None:
    """
    Parsed URL-encoded body, with nested keys expanded.

    Returns None when the request was not form-encoded.
    """
    return getattr(request.state, "form_body", None)


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
JsonBodyDep = Annotated[Any, Depends(get_json_body)]
FormBodyDep = Annotated[dict[str, Any] | None, Depends(get_form_body)]
