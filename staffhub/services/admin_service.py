"""
Admin service - identity management with the service key.
"""
import logging
import secrets
from typing import Any, Dict, List, Optional

from staffhub.client import BackendClient
from staffhub.core.exceptions import NotFoundError, raise_forbidden
from staffhub.core.security import role_from_metadata
from staffhub.repositories.user_repo import UserProfileRepository
from staffhub.schemas.auth import AdminUserUpdate

logger = logging.getLogger(__name__)

TEMPORARY_PASSWORD_BYTES = 9


def user_summary(user: Dict[str, Any]) -> Dict[str, Any]:
    """The fields of an identity-service user the admin screens show."""
    return {
        "id": user.get("id"),
        "email": user.get("email"),
        "role": role_from_metadata(user),
        "full_name": (user.get("user_metadata") or {}).get("full_name"),
        "email_confirmed": bool(user.get("email_confirmed_at") or user.get("confirmed_at")),
        "banned_until": user.get("banned_until"),
        "created_at": user.get("created_at"),
        "last_sign_in_at": user.get("last_sign_in_at"),
    }


class AdminService:
    """Service for user administration. Requires a service-key client."""

    def __init__(self, client: BackendClient):
        if not client.is_service_role:
            raise_forbidden("Admin operations require the service key")
        self.client = client
        self.profile_repo = UserProfileRepository(client)

    async def list_users(self, page: int = 1, per_page: int = 50) -> List[Dict[str, Any]]:
        users = await self.client.auth.list_users(page=page, per_page=per_page)
        return [user_summary(user) for user in users]

    async def update_user(self, user_id: str, data: AdminUserUpdate) -> Dict[str, Any]:
        """Change identity attributes, mirroring name and role onto the profile row."""
        values = data.model_dump(exclude_unset=True)
        attributes: Dict[str, Any] = {}
        for field in ("email", "password", "ban_duration"):
            if values.get(field):
                attributes[field] = values[field]
        if "full_name" in values:
            attributes["user_metadata"] = {"full_name": values["full_name"]}
        if values.get("role"):
            attributes["app_metadata"] = {"role": values["role"]}

        user = await self.client.auth.update_user_by_id(user_id, attributes)

        profile_values = {k: values[k] for k in ("email", "full_name", "role") if values.get(k)}
        if profile_values:
            updated = await self.profile_repo.update(user_id, profile_values)
            if not updated:
                logger.warning(f"No profile row for user {user_id}")
        return user_summary(user)

    async def delete_user(self, user_id: str) -> None:
        await self.client.auth.delete_user(user_id)
        try:
            await self.profile_repo.delete(user_id)
        except NotFoundError:
            pass
        logger.info(f"User {user_id} deleted")

    async def confirm_email(self, user_id: str) -> Dict[str, Any]:
        """Mark the user's email as confirmed without the confirmation mail."""
        user = await self.client.auth.update_user_by_id(user_id, {"email_confirm": True})
        return user_summary(user)

    async def set_temporary_password(self, user_id: str, password: Optional[str] = None) -> Dict[str, Any]:
        """Set a password for the user to change after signing in. Generated when not given."""
        password = password or secrets.token_urlsafe(TEMPORARY_PASSWORD_BYTES)
        await self.client.auth.update_user_by_id(user_id, {"password": password})
        logger.info(f"Temporary password set for user {user_id}")
        return {"user_id": user_id, "temporary_password": password}
