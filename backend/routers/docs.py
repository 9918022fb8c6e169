# =============================================================================
# backend/routers/docs.py - API Documentation
# =============================================================================
# Serves Swagger UI at /api/docs, backed by a static OpenAPI document.
#
# The document describes the service only (title, version, base URL). Its
# `paths` object is empty: it is written by hand, not generated from the
# registered routes.
# =============================================================================

from typing import Any

from fastapi import APIRouter
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import HTMLResponse, JSONResponse

from backend.constants import API_BASE_PATH, DOCS_OPENAPI_PATH, DOCS_PATH

router = APIRouter(include_in_schema=False)


def build_openapi_document(base_path: str = API_BASE_PATH) -> dict[str, Any]:
    """
    Build the OpenAPI document shown by the docs UI.

    Args:
        base_path: URL prefix the API is mounted at, advertised as the server URL
    """
    return {
        "openapi": "3.0.0",
        "info": {
            "title": "API",
            "version": "1.0.0",
            "description": "Auto-generated API docs",
        },
        "servers": [
            {
                "url": base_path,
                "description": "API base path",
            },
        ],
        "paths": {},
    }


OPENAPI_DOCUMENT = build_openapi_document()

# The Swagger UI page pulls its bundle and stylesheet from jsdelivr, its
# favicon from fastapi.tiangolo.com, and boots from an inline <script>
SWAGGER_ASSET_HOST = "https://cdn.jsdelivr.net"
SWAGGER_FAVICON_HOST = "https://fastapi.tiangolo.com"
DOCS_CONTENT_SECURITY_POLICY = (
    "default-src 'self';base-uri 'self';object-src 'none';frame-ancestors 'self';"
    f"script-src 'self' 'unsafe-inline' {SWAGGER_ASSET_HOST};"
    f"style-src 'self' 'unsafe-inline' {SWAGGER_ASSET_HOST};"
    f"img-src 'self' data: {SWAGGER_ASSET_HOST} {SWAGGER_FAVICON_HOST};"
    "connect-src 'self'"
)


@router.get(DOCS_PATH, response_class=HTMLResponse)
async def swagger_ui() -> HTMLResponse:
    """Interactive API documentation."""
    response = get_swagger_ui_html(
        openapi_url=DOCS_OPENAPI_PATH,
        title=f"{OPENAPI_DOCUMENT['info']['title']} - Swagger UI",
    )
    # Kept by SecurityHeadersMiddleware, which only fills in missing headers
    response.headers["Content-Security-Policy"] = DOCS_CONTENT_SECURITY_POLICY
    return response


@router.get(DOCS_OPENAPI_PATH)
async def openapi_document() -> JSONResponse:
    """The static document rendered by the docs UI."""
    return JSONResponse(OPENAPI_DOCUMENT)
