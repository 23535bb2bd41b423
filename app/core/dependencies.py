# app/core/dependencies.py
import logging
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.logging import mask_token
from app.core.security import AuthUser, SupabaseAuthenticator
from app.database import get_db, get_session_factory
from app.exceptions.base import AppPermissionError, UnauthorizedError
from app.services import cached_queries

logger = logging.getLogger(__name__)

__all__ = [
    "get_authenticator",
    "get_current_user",
    "get_db",
    "get_session_factory",
    "require_admin",
]


def get_authenticator() -> SupabaseAuthenticator:
    return SupabaseAuthenticator()


def _bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization")
    if header and header.startswith("Bearer "):
        return header[len("Bearer "):].strip()
    return None


async def get_current_user(
    request: Request,
    auth: SupabaseAuthenticator = Depends(get_authenticator),
) -> AuthUser:
    """Resolve the caller from a bearer token, or else from the session cookie.

    Raises:
        UnauthorizedError: No credentials, or the provider rejected them
    """
    token = _bearer_token(request)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Auth header: {mask_token(token)}; headers: {sorted(request.headers.keys())}")

    if token:
        user = auth.verify_token(token)
        logger.debug(f"Bearer auth succeeded for user {user.id}")
    else:
        cookie = request.cookies.get(settings.auth_cookie_name)
        if not cookie:
            raise UnauthorizedError("Unauthorized")
        user = auth.verify_token(cookie)
        logger.debug(f"Cookie auth succeeded for user {user.id}")

    request.state.user_id = user.id
    return user


async def require_admin(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> AuthUser:
    """Allow only callers whose profile carries the admin flag.

    Raises:
        UnauthorizedError: Caller is not authenticated
        AppPermissionError: Caller is authenticated but not an admin
    """
    if not await cached_queries.is_user_admin(db, current_user.id):
        logger.warning(f"Non-admin user {current_user.id} tried to reach the dashboard")
        raise AppPermissionError("Forbidden - Admin access required")
    return current_user
