from fastapi import APIRouter

from .endpoints import health
from .endpoints import legal

api_router = APIRouter()

# Include endpoint routers
# Health and status (no prefix)
api_router.include_router(health.router, prefix="", tags=["health"])
api_router.include_router(legal.router, prefix="", tags=["legal"])
