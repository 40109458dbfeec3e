"""JWT access tokens."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from backend.app.config import Settings
from backend.app.db.repositories import UserRecord
from backend.app.errors import AuthenticationError
from backend.app.models.common import Role


@dataclass(frozen=True)
class TokenClaims:
    """Decoded access token claims."""

    user_id: uuid.UUID
    email: str
    role: Role
    organization_id: uuid.UUID
    expires_at: datetime


def issue_access_token(user: UserRecord, settings: Settings, now: datetime | None = None) -> str:
    """Issue a signed access token for a user.

    Args:
        user: Authenticated user
        settings: Settings carrying secret, algorithm and lifetime
        now: Issue time (for testing)

    Returns:
        Encoded JWT
    """
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role.value,
        "organization_id": str(user.organization_id),
        "iat": issued_at,
        "exp": issued_at + timedelta(hours=settings.jwt_expires_hours),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> TokenClaims:
    """Verify signature and expiry and return the claims.

    Raises:
        AuthenticationError: If the token is expired, tampered with or malformed
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError("Token expired") from e
    except jwt.InvalidTokenError as e:
        raise AuthenticationError("Invalid token") from e

    try:
        return TokenClaims(
            user_id=uuid.UUID(payload["sub"]),
            email=payload.get("email", ""),
            role=Role(payload["role"]),
            organization_id=uuid.UUID(payload["organization_id"]),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (KeyError, ValueError) as e:
        raise AuthenticationError("Invalid token claims") from e
