"""
Authentication API routes.
Sign-up, sessions and passwords are delegated to the identity service.
"""
from typing import Optional

from fastapi import APIRouter, Depends

from staffhub.api.deps import (
    CurrentUser,
    get_backend,
    get_current_user,
    get_optional_service_backend,
    get_settings,
)
from staffhub.client import BackendClient
from staffhub.config import Settings
from staffhub.schemas.auth import (
    ChangePasswordRequest,
    CurrentUserResponse,
    LoginRequest,
    PasswordResetRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
)
from staffhub.schemas.common import MessageResponse
from staffhub.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=201)
async def register(
    request: RegisterRequest,
    backend: BackendClient = Depends(get_backend),
    service_backend: Optional[BackendClient] = Depends(get_optional_service_backend)
):
    """Register a new user and create their profile."""
    auth_service = AuthService(backend, service_backend)
    return await auth_service.register(
        email=request.email,
        password=request.password,
        full_name=request.full_name,
        company_id=request.company_id
    )


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, backend: BackendClient = Depends(get_backend)):
    """Login and get access + refresh tokens."""
    return await AuthService(backend).login(request.email, request.password)


@router.post("/refresh", response_model=TokenResponse)
async def refresh(request: RefreshRequest, backend: BackendClient = Depends(get_backend)):
    """Exchange a refresh token for a new session."""
    return await AuthService(backend).refresh(request.refresh_token)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    current_user: CurrentUser = Depends(get_current_user),
    backend: BackendClient = Depends(get_backend)
):
    """Revoke the current session."""
    await AuthService(backend).logout(current_user.access_token)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=CurrentUserResponse)
async def me(
    current_user: CurrentUser = Depends(get_current_user),
    backend: BackendClient = Depends(get_backend)
):
    """Current user with profile details."""
    auth_service = AuthService(backend, backend.with_token(current_user.access_token))
    return await auth_service.current_user(current_user.user)


@router.post("/password-reset", response_model=MessageResponse)
async def request_password_reset(
    request: PasswordResetRequest,
    backend: BackendClient = Depends(get_backend),
    settings: Settings = Depends(get_settings)
):
    """
    Request a password reset email.
    Always returns success to prevent email enumeration.
    """
    redirect_to = f"{settings.FRONTEND_URL.rstrip('/')}/reset-password"
    return await AuthService(backend).request_password_reset(request.email, redirect_to)


@router.post("/password", response_model=MessageResponse)
async def change_password(
    request: ChangePasswordRequest,
    current_user: CurrentUser = Depends(get_current_user),
    backend: BackendClient = Depends(get_backend)
):
    """Set a new password for the signed-in user."""
    return await AuthService(backend).change_password(current_user.access_token, request.new_password)
