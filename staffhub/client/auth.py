"""
Identity API of the hosted backend (GoTrue wire format).
Password sign-up/sign-in, sessions, and admin user management.
"""
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from staffhub.core.exceptions import ForbiddenError

if TYPE_CHECKING:
    from staffhub.client.base import BackendClient

logger = logging.getLogger(__name__)

AUTH_PATH = "/auth/v1"


class AuthClient:
    """Pass-through to the identity endpoints; holds no session state."""

    def __init__(self, client: "BackendClient"):
        self._client = client

    async def _call(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        bearer: Optional[str] = None,
    ) -> Any:
        response = await self._client.request(
            method,
            f"{AUTH_PATH}{path}",
            params=params,
            json=json,
            bearer=bearer,
            service="Auth",
        )
        return response.json() if response.content else None

    def _require_service_role(self) -> None:
        if not self._client.is_service_role:
            raise ForbiddenError("Admin user management requires the service key")

    # Password auth
    async def sign_up(self, email: str, password: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Create an identity. Returns the user and, when auto-confirm is on, a session."""
        return await self._call("POST", "/signup", json={
            "email": email,
            "password": password,
            "data": data or {},
        })

    async def sign_in_with_password(self, email: str, password: str) -> Dict[str, Any]:
        """Exchange credentials for a session (access + refresh token)."""
        return await self._call(
            "POST", "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )

    async def refresh_session(self, refresh_token: str) -> Dict[str, Any]:
        return await self._call(
            "POST", "/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )

    async def sign_out(self, access_token: str) -> None:
        await self._call("POST", "/logout", bearer=access_token)

    async def get_user(self, access_token: str) -> Dict[str, Any]:
        """Resolve the user behind an access token."""
        return await self._call("GET", "/user", bearer=access_token)

    async def update_user(self, access_token: str, attributes: Dict[str, Any]) -> Dict[str, Any]:
        return await self._call("PUT", "/user", json=attributes, bearer=access_token)

    async def reset_password_for_email(self, email: str, redirect_to: Optional[str] = None) -> None:
        params = {"redirect_to": redirect_to} if redirect_to else None
        await self._call("POST", "/recover", json={"email": email}, params=params)

    # Admin (service key only)
    async def list_users(self, page: int = 1, per_page: int = 50) -> List[Dict[str, Any]]:
        self._require_service_role()
        body = await self._call("GET", "/admin/users", params={"page": page, "per_page": per_page})
        if isinstance(body, dict):
            return body.get("users", [])
        return body or []

    async def get_user_by_id(self, user_id: str) -> Dict[str, Any]:
        self._require_service_role()
        return await self._call("GET", f"/admin/users/{user_id}")

    async def create_user(self, attributes: Dict[str, Any]) -> Dict[str, Any]:
        self._require_service_role()
        return await self._call("POST", "/admin/users", json=attributes)

    async def update_user_by_id(self, user_id: str, attributes: Dict[str, Any]) -> Dict[str, Any]:
        self._require_service_role()
        logger.info(f"Updating auth user {user_id}: {sorted(attributes)}")
        return await self._call("PUT", f"/admin/users/{user_id}", json=attributes)

    async def delete_user(self, user_id: str) -> None:
        self._require_service_role()
        logger.info(f"Deleting auth user {user_id}")
        await self._call("DELETE", f"/admin/users/{user_id}")
