"""
API dependencies - shared across all routes.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from staffhub.client import BackendClient
from staffhub.config import Settings
from staffhub.core.exceptions import ConfigurationError, raise_forbidden, raise_unauthorized
from staffhub.core.security import decode_access_token, identity_from_claims, role_from_metadata


bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
    """Identity behind the request's access token."""
    id: str
    email: Optional[str]
    role: str
    access_token: str
    user: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_backend(request: Request) -> BackendClient:
    """Anon-key client built at startup."""
    return request.app.state.backend


def get_optional_service_backend(request: Request) -> Optional[BackendClient]:
    return getattr(request.app.state, "service_backend", None)


def get_service_backend(
    client: Optional[BackendClient] = Depends(get_optional_service_backend)
) -> BackendClient:
    """Service-key client; only present when the key is configured."""
    if client is None:
        raise ConfigurationError(
            "Service key is not configured",
            missing=["SUPABASE_SERVICE_ROLE_KEY"]
        )
    return client


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
    backend: BackendClient = Depends(get_backend)
) -> CurrentUser:
    """Resolve the bearer token, locally when the JWT secret is known."""
    if not credentials or not credentials.credentials:
        raise_unauthorized("Not authenticated")
    token = credentials.credentials

    if settings.SUPABASE_JWT_SECRET:
        claims = decode_access_token(token, settings.SUPABASE_JWT_SECRET)
        if not claims or not claims.get("sub"):
            raise_unauthorized("Could not validate credentials")
        user = identity_from_claims(claims)
    else:
        user = await backend.auth.get_user(token)

    return CurrentUser(
        id=str(user["id"]),
        email=user.get("email"),
        role=role_from_metadata(user),
        access_token=token,
        user=user,
    )


def get_user_backend(
    current_user: CurrentUser = Depends(get_current_user),
    backend: BackendClient = Depends(get_backend)
) -> BackendClient:
    """Client whose table calls run as the signed-in user (row-level security applies)."""
    return backend.with_token(current_user.access_token)


async def require_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not current_user.is_admin:
        raise_forbidden("Administrator role required")
    return current_user
