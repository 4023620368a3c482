"""
Authentication dependencies.

The token comes from an `Authorization: Bearer` header or, failing that,
from the session cookie set at login. Resolution and role checks are
FastAPI dependencies so routes declare their access level in the
signature:

    @router.delete("/{event_id}")
    async def delete_event(..., user: dict = Depends(require_admin)):
        ...
"""

from typing import Any, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.dependencies import get_credentials
from core.entities import Role
from core.exceptions import ForbiddenError, UnauthorizedError
from services.credentials import CredentialService


# auto_error=False so a missing header falls through to the cookie
bearer_scheme = HTTPBearer(auto_error=False)


def extract_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> Optional[str]:
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    cookie_name = request.app.state.settings.session_cookie_name
    return request.cookies.get(cookie_name) or None


async def get_current_user(
    request: Request,
    bearer: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    credentials: CredentialService = Depends(get_credentials),
) -> dict[str, Any]:
    """Resolve the acting principal or fail with 401."""
    token = extract_token(request, bearer)
    return await credentials.resolve_principal(token)


async def optional_user(
    request: Request,
    bearer: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    credentials: CredentialService = Depends(get_credentials),
) -> Optional[dict[str, Any]]:
    """Same resolution as get_current_user, but never blocks the request."""
    token = extract_token(request, bearer)
    if not token:
        return None
    try:
        return await credentials.resolve_principal(token)
    except UnauthorizedError:
        return None


async def require_admin(
    user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
    if user.get("role") != Role.ADMIN.value:
        raise ForbiddenError("Admin privileges required")
    return user


async def require_moderator_or_admin(
    user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
    if user.get("role") not in (Role.ADMIN.value, Role.MODERATOR.value):
        raise ForbiddenError("Moderator or admin privileges required")
    return user


def is_staff(user: Optional[dict[str, Any]]) -> bool:
    return user is not None and user.get("role") in (Role.ADMIN.value, Role.MODERATOR.value)
