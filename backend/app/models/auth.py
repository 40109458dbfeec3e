"""Authentication request/response models."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from backend.app.models.common import Role

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterRequest(BaseModel):
    """Request body for POST /auth/register."""

    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=254)
    password: str = Field(..., min_length=6, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    organization_name: str = Field(..., min_length=1, max_length=200)
    role: Role = Role.member


class LoginRequest(BaseModel):
    """Request body for POST /auth/login."""

    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=1)


class UserProfile(BaseModel):
    """Public view of a user account."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    first_name: str
    last_name: str
    role: Role
    organization_id: UUID


class TokenResponse(BaseModel):
    """Bearer token issued on login/registration."""

    access_token: str
    token_type: str = "bearer"
    user: UserProfile
