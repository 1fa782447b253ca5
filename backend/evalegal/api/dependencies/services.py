"""
Service dependencies for FastAPI endpoints.

The collaborators are built once in the application lifespan and stored on
``app.state``; endpoints receive them through these providers so tests can
swap them with ``app.dependency_overrides``.
"""
from fastapi import Request

from evalegal.config.settings import Settings
from evalegal.controllers.legal_controller import LegalAnalysisController
from evalegal.services.bitrix import BitrixClient


def get_legal_controller(request: Request) -> LegalAnalysisController:
    """Dependency injection for LegalAnalysisController."""
    return request.app.state.legal_controller


def get_bitrix_client(request: Request) -> BitrixClient:
    """Dependency injection for BitrixClient."""
    return request.app.state.bitrix_client


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings
