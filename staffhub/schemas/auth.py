"""
Authentication schemas.
"""
import uuid
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    """User registration request."""
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: Optional[str] = None
    company_id: Optional[uuid.UUID] = None

    class Config:
        json_schema_extra = {
            "example": {
                "email": "rrhh@empresa.cl",
                "password": "securepassword123",
                "full_name": "Camila Rojas"
            }
        }


class LoginRequest(BaseModel):
    """User login request."""
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    """Session issued by the identity service."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds
    user_id: Optional[str] = None


class RefreshRequest(BaseModel):
    """Refresh token request."""
    refresh_token: str


class PasswordResetRequest(BaseModel):
    """Request password reset."""
    email: EmailStr


class ChangePasswordRequest(BaseModel):
    """Change password for logged-in user."""
    new_password: str = Field(..., min_length=6)


class CurrentUserResponse(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    role: str = "user"
    company_id: Optional[uuid.UUID] = None
    email_confirmed: bool = False


class AdminUserUpdate(BaseModel):
    """Fields an administrator may change on an auth user."""
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)
    full_name: Optional[str] = None
    role: Optional[str] = Field(None, pattern="^(user|admin)$")
    ban_duration: Optional[str] = None  # e.g. "24h", or "none" to lift
