"""Authentication service - registration, login and profile lookup."""

import logging
import uuid
from datetime import datetime, timezone

from backend.app.auth.passwords import hash_password, verify_password
from backend.app.auth.tokens import issue_access_token
from backend.app.config import Settings
from backend.app.db.repositories import IdentityStore, OrganizationRecord, UserRecord
from backend.app.errors import AuthenticationError, ConflictError, NotFoundError
from backend.app.models.auth import LoginRequest, RegisterRequest, TokenResponse, UserProfile
from backend.app.models.common import Role

logger = logging.getLogger(__name__)


class AuthService:
    """Registers users and exchanges credentials for bearer tokens."""

    def __init__(self, identity: IdentityStore, settings: Settings) -> None:
        self._identity = identity
        self._settings = settings

    async def register(self, request: RegisterRequest) -> TokenResponse:
        """Register a user, creating the named organization if it does not exist.

        The requested role is honored only for the founder of a new
        organization; anyone joining an existing organization becomes a member.

        Raises:
            ConflictError: If the email is already registered
        """
        if await self._identity.find_user_by_email(request.email) is not None:
            raise ConflictError("Email already registered")

        now = datetime.now(timezone.utc)
        org = await self._identity.find_organization_by_name(request.organization_name)
        role = Role.member
        if org is None:
            org = await self._identity.save_organization(
                OrganizationRecord(
                    id=uuid.uuid4(),
                    name=request.organization_name,
                    parent_id=None,
                    created_at=now,
                )
            )
            role = request.role
            logger.info("Created organization %s for new registrant", org.id)

        user = await self._identity.save_user(
            UserRecord(
                id=uuid.uuid4(),
                email=request.email.lower(),
                password_hash=hash_password(request.password),
                first_name=request.first_name,
                last_name=request.last_name,
                role=role,
                organization_id=org.id,
                created_at=now,
                updated_at=now,
            )
        )
        logger.info("Registered user %s in organization %s as %s", user.id, org.id, role.value)

        return self._token_response(user)

    async def login(self, request: LoginRequest) -> TokenResponse:
        """Verify credentials and issue a token.

        Raises:
            AuthenticationError: If the email is unknown or the password is wrong
        """
        user = await self._identity.find_user_by_email(request.email)
        if user is None or not verify_password(request.password, user.password_hash):
            logger.warning("Failed login attempt")
            raise AuthenticationError("Invalid credentials")

        return self._token_response(user)

    async def profile(self, user_id: uuid.UUID) -> UserProfile:
        """Public profile of a user."""
        user = await self._identity.find_user_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return UserProfile.model_validate(user)

    def _token_response(self, user: UserRecord) -> TokenResponse:
        return TokenResponse(
            access_token=issue_access_token(user, self._settings),
            user=UserProfile.model_validate(user),
        )
