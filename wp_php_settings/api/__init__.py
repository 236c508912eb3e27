"""API layer: FastAPI app, routes, auth, and dependencies."""

from .app import create_app
from .dependencies import AuthContext, get_auth_context, get_service, require_admin_permission

__all__ = [
    "AuthContext",
    "create_app",
    "get_auth_context",
    "get_service",
    "require_admin_permission",
]
