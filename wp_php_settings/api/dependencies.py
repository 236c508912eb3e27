"""Shared FastAPI dependencies for API routes."""

from fastapi import Request

from ..services.settings_service import SettingsService
from .auth import AuthContext, get_auth_context, require_admin_permission


def get_service(request: Request) -> SettingsService:
    """Get the settings service from app state."""
    return request.app.state.service


__all__ = [
    "AuthContext",
    "get_auth_context",
    "get_service",
    "require_admin_permission",
]
