"""
Health check endpoints.
Simple endpoints for monitoring application health and status.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from evalegal.api.dependencies.services import get_app_settings
from evalegal.config.settings import Settings

router = APIRouter(tags=["health"])


@router.get("/health", response_class=PlainTextResponse)
async def health_check() -> str:
    """Basic health check endpoint."""
    return "ok"


@router.get("/", response_class=PlainTextResponse)
async def root_status(settings: Settings = Depends(get_app_settings)) -> str:
    """Status banner for the service root."""
    return f"{settings.app_name} server is running"
