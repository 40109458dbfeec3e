"""Authentication endpoints - register, login, current user."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from backend.app.api.auth import get_current_context
from backend.app.api.deps import get_auth_service
from backend.app.db.context import RequestContext
from backend.app.models.auth import LoginRequest, RegisterRequest, TokenResponse, UserProfile
from backend.app.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenResponse:
    """Register a user and return a bearer token."""
    return await service.register(request)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenResponse:
    """Exchange email and password for a bearer token."""
    return await service.login(request)


@router.get("/me", response_model=UserProfile)
async def me(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> UserProfile:
    """Profile of the authenticated user."""
    return await service.profile(ctx.user_id)
