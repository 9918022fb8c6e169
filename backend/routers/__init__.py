# =============================================================================
# backend/routers/ - API Route Definitions
# =============================================================================
# - api.py: The API route table, mounted at /api (no endpoints yet)
# - docs.py: Swagger UI and the static OpenAPI document at /api/docs
#
# Each router is mounted in main.py.
# =============================================================================

from . import api
from . import docs

__all__ = [
    "api",
    "docs",
]
