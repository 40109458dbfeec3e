"""Integration tests for registration and login."""

import pytest

from backend.app.auth.tokens import decode_access_token
from backend.app.config import Settings
from backend.app.db.inmemory import InMemoryIdentityStore
from backend.app.errors import AuthenticationError, ConflictError
from backend.app.models.auth import LoginRequest, RegisterRequest
from backend.app.models.common import Role
from backend.app.services.auth import AuthService

SETTINGS = Settings(jwt_secret="auth-service-secret")


def _register(email: str, org: str, role: Role = Role.member) -> RegisterRequest:
    return RegisterRequest(
        email=email,
        password="hunter22",
        first_name="Grace",
        last_name="Hopper",
        organization_name=org,
        role=role,
    )


@pytest.fixture
def service() -> AuthService:
    return AuthService(InMemoryIdentityStore(), SETTINGS)


@pytest.mark.asyncio
async def test_register_founds_organization_with_requested_role(service: AuthService) -> None:
    response = await service.register(_register("grace@navy.test", "Navy", Role.owner))

    assert response.token_type == "bearer"
    assert response.user.role == Role.owner
    claims = decode_access_token(response.access_token, SETTINGS)
    assert claims.user_id == response.user.id
    assert claims.organization_id == response.user.organization_id


@pytest.mark.asyncio
async def test_joining_existing_org_always_member(service: AuthService) -> None:
    founder = await service.register(_register("founder@acme.test", "Acme", Role.owner))

    joiner = await service.register(_register("joiner@acme.test", "Acme", Role.owner))

    assert joiner.user.organization_id == founder.user.organization_id
    assert joiner.user.role == Role.member


@pytest.mark.asyncio
async def test_duplicate_email_conflicts(service: AuthService) -> None:
    await service.register(_register("dup@acme.test", "Acme"))

    with pytest.raises(ConflictError, match="Email already registered"):
        await service.register(_register("DUP@acme.test", "Other"))


@pytest.mark.asyncio
async def test_login_with_valid_credentials(service: AuthService) -> None:
    registered = await service.register(_register("Login@Acme.test", "Acme"))

    response = await service.login(LoginRequest(email="login@acme.test", password="hunter22"))

    assert response.user.id == registered.user.id
    assert response.user.email == "login@acme.test"


@pytest.mark.asyncio
async def test_login_wrong_password(service: AuthService) -> None:
    await service.register(_register("wrong@acme.test", "Acme"))

    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        await service.login(LoginRequest(email="wrong@acme.test", password="nope"))


@pytest.mark.asyncio
async def test_login_unknown_email(service: AuthService) -> None:
    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        await service.login(LoginRequest(email="ghost@acme.test", password="hunter22"))


@pytest.mark.asyncio
async def test_profile(service: AuthService) -> None:
    registered = await service.register(_register("me@acme.test", "Acme"))

    profile = await service.profile(registered.user.id)

    assert profile == registered.user
