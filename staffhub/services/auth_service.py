"""
Authentication service - handles all auth operations.
Identities, passwords and sessions live in the hosted identity service;
this service adds the `users` profile row and shapes the responses.
"""
import logging
import uuid
from typing import Any, Dict, Optional

from staffhub.client import BackendClient
from staffhub.core.exceptions import (
    AlreadyExistsError,
    NotFoundError,
    UnauthorizedError,
    UpstreamUnavailableError,
    ValidationError,
)
from staffhub.core.security import role_from_metadata
from staffhub.repositories.user_repo import UserProfileRepository

logger = logging.getLogger(__name__)


def token_response(session: Dict[str, Any]) -> Dict[str, Any]:
    """Shape an identity-service session for API clients."""
    user = session.get("user") or {}
    return {
        "access_token": session["access_token"],
        "refresh_token": session.get("refresh_token", ""),
        "token_type": "bearer",
        "expires_in": int(session.get("expires_in") or 0),
        "user_id": user.get("id"),
    }


class AuthService:
    """Service for authentication operations."""

    def __init__(self, client: BackendClient, profile_client: Optional[BackendClient] = None):
        self.client = client
        # Profile rows are written with the service key when one is available
        self.profile_repo = UserProfileRepository(profile_client or client)

    async def register(
        self,
        email: str,
        password: str,
        full_name: Optional[str] = None,
        company_id: Optional[uuid.UUID] = None
    ) -> dict:
        """Create the identity, then its profile row."""
        try:
            result = await self.client.auth.sign_up(email, password, data={"full_name": full_name})
        except AlreadyExistsError:
            raise AlreadyExistsError("User", "email", email)

        # With auto-confirm the response is a session; otherwise it is the user itself
        user = result.get("user") or result
        user_id = user.get("id")
        if not user_id:
            raise UpstreamUnavailableError("Auth", "sign-up returned no user id")

        profile_created = True
        try:
            await self.profile_repo.create({
                "id": user_id,
                "email": email,
                "full_name": full_name,
                "role": "user",
                "company_id": str(company_id) if company_id else None,
                "is_active": True,
            })
        except (AlreadyExistsError, NotFoundError, ValidationError, UpstreamUnavailableError) as e:
            # The identity exists either way; the profile can be created on next login
            logger.warning(f"Profile row for {user_id} not created: {e.message}")
            profile_created = False

        session = token_response(result) if result.get("access_token") else None
        return {
            "message": "Registration successful" if session else "Check your email to confirm your account",
            "user_id": user_id,
            "email": email,
            "email_confirmation_required": session is None,
            "profile_created": profile_created,
            "session": session,
        }

    async def login(self, email: str, password: str) -> dict:
        try:
            session = await self.client.auth.sign_in_with_password(email, password)
        except (UnauthorizedError, ValidationError):
            raise UnauthorizedError("Incorrect email or password")
        return token_response(session)

    async def refresh(self, refresh_token: str) -> dict:
        try:
            session = await self.client.auth.refresh_session(refresh_token)
        except (UnauthorizedError, ValidationError, NotFoundError):
            raise UnauthorizedError("Invalid or expired refresh token")
        return token_response(session)

    async def logout(self, access_token: str) -> None:
        await self.client.auth.sign_out(access_token)

    async def current_user(self, user: Dict[str, Any]) -> dict:
        """Identity merged with its profile row (when there is one)."""
        metadata = user.get("user_metadata") or {}
        profile = await self.profile_repo.get(user["id"])

        return {
            "id": str(user["id"]),
            "email": user.get("email") or (profile.email if profile else ""),
            "full_name": (profile.full_name if profile else None) or metadata.get("full_name"),
            "role": profile.role if profile else role_from_metadata(user),
            "company_id": profile.company_id if profile else None,
            "email_confirmed": bool(user.get("email_confirmed_at") or user.get("confirmed_at")),
        }

    async def request_password_reset(self, email: str, redirect_to: Optional[str] = None) -> dict:
        """Ask the identity service to mail a reset link. Always reports success."""
        try:
            await self.client.auth.reset_password_for_email(email, redirect_to)
        except (NotFoundError, ValidationError) as e:
            # Don't reveal whether the address is registered
            logger.info(f"Password reset for {email} not sent: {e.message}")
        return {"message": "If the email exists, a reset link has been sent"}

    async def change_password(self, access_token: str, new_password: str) -> dict:
        await self.client.auth.update_user(access_token, {"password": new_password})
        return {"message": "Password updated"}
