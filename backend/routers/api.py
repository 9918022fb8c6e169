# =============================================================================
# backend/routers/api.py - API Route Table
# =============================================================================
# Mounted at API_BASE_PATH (/api) by main.create_app(). No endpoints are
# registered yet, so every request under /api answers 404.
#
# Adding an endpoint:
#   @router.get("/users/{user_id}")
#   async def get_user(user_id: str):
#       raise RouteError(status.HTTP_404_NOT_FOUND, "User not found")
#
# Routes match in registration order; on an exact path conflict the first
# one registered wins.
# =============================================================================

from fastapi import APIRouter

router = APIRouter()
