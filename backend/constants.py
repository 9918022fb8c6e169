# =============================================================================
# backend/constants.py - Paths and Fixed Locations
# =============================================================================
# URL prefixes the application mounts things under, and where the static
# files live on disk.
# =============================================================================

from pathlib import Path

# Base path the API route table is mounted at
API_BASE_PATH = "/api"

# Swagger UI and the static OpenAPI document behind it
DOCS_PATH = f"{API_BASE_PATH}/docs"
DOCS_OPENAPI_PATH = f"{DOCS_PATH}/openapi.json"

# Static files (js, css, robots.txt, ...)
PUBLIC_DIR = Path(__file__).resolve().parent / "public"
