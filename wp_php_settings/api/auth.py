"""API authentication and authorization (config-based, no hardcoded keys)."""

import hmac
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException, Security
from fastapi.security import APIKeyHeader

from ..core.config import get_settings
from ..core.schemas import Actor

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


@dataclass
class AuthContext:
    """Authentication context for a request."""

    user_login: str
    user_id: Optional[str] = None
    api_key: str = ""
    can_manage_options: bool = False

    def to_actor(self) -> Actor:
        return Actor(
            user_id=self.user_id,
            user_login=self.user_login,
            can_manage_options=self.can_manage_options,
        )


def _build_api_keys() -> dict:
    """Build API key map from settings (env: AUTH__API_KEY, AUTH__ADMIN_API_KEY, AUTH__DEFAULT_USER_LOGIN)."""
    auth = get_settings().auth
    keys: dict = {}
    if auth.api_key:
        keys[auth.api_key] = AuthContext(
            user_login=auth.default_user_login,
            can_manage_options=(auth.api_key == auth.admin_api_key and bool(auth.admin_api_key)),
            api_key=auth.api_key,
        )
    if auth.admin_api_key and auth.admin_api_key != auth.api_key:
        keys[auth.admin_api_key] = AuthContext(
            user_login=auth.default_user_login,
            can_manage_options=True,
            api_key=auth.admin_api_key,
        )
    return keys


async def get_auth_context(
    api_key: Optional[str] = Security(api_key_header),
    x_user_login: Optional[str] = Header(None),
    x_user_id: Optional[str] = Header(None),
) -> AuthContext:
    """Dependency to get auth context from request.

    X-User-Login and X-User-Id name the acting user recorded in history.
    """
    if not api_key:
        raise HTTPException(status_code=401, detail="API key required")

    context = None
    for known_key, ctx in _build_api_keys().items():
        if hmac.compare_digest(api_key, known_key):
            context = ctx
            break
    if not context:
        raise HTTPException(status_code=401, detail="Invalid API key")

    if x_user_login or x_user_id:
        context = AuthContext(
            user_login=x_user_login or context.user_login,
            user_id=x_user_id or context.user_id,
            api_key=context.api_key,
            can_manage_options=context.can_manage_options,
        )
    return context


async def require_admin_permission(
    context: AuthContext = Depends(get_auth_context),
) -> AuthContext:
    """Require permission to change configuration."""
    if not context.can_manage_options:
        raise HTTPException(status_code=403, detail="Admin permission required")
    return context
