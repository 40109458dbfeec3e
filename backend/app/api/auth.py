"""Bearer token authentication dependency.

Turns an `Authorization: Bearer <jwt>` header into the RequestContext used as
the actor for every core operation. Role and organization are re-read from the
identity store so a stale token cannot outlive an administrative change.
"""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from backend.app.api.deps import get_identity_store
from backend.app.auth.tokens import decode_access_token
from backend.app.config import Settings, get_settings
from backend.app.db.context import RequestContext
from backend.app.db.repositories import IdentityStore
from backend.app.errors import AuthenticationError


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_context(
    identity: Annotated[IdentityStore, Depends(get_identity_store)],
    settings: Annotated[Settings, Depends(get_settings)],
    authorization: Annotated[str | None, Header()] = None,
) -> RequestContext:
    """Extract request context from authorization header.

    Args:
        identity: Identity store used to resolve the token subject
        settings: Settings carrying the JWT secret
        authorization: Authorization header (e.g., "Bearer <token>")

    Returns:
        RequestContext with org_id, user_id and role

    Raises:
        HTTPException: 401 if the header is missing or the token is invalid
    """
    if not authorization:
        raise _unauthorized("Not authenticated")

    if not authorization.startswith("Bearer "):
        raise _unauthorized("Invalid authorization header format")

    token = authorization[7:]  # Strip "Bearer "

    try:
        claims = decode_access_token(token, settings)
    except AuthenticationError as e:
        raise _unauthorized(str(e)) from e

    user = await identity.find_user_by_id(claims.user_id)
    if user is None:
        raise _unauthorized("User no longer exists")

    return RequestContext(org_id=user.organization_id, user_id=user.id, role=user.role)
