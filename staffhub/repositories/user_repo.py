"""
User profile and credential repositories.
"""
import json
import logging
import uuid
from typing import Any, Dict, List, Optional

from staffhub.client import BackendClient
from staffhub.models.credential import UserCredential
from staffhub.models.user import UserProfile
from staffhub.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

LEGACY_PROFILE_FIELDS = ("department", "position", "phone")


def lift_legacy_profile(row: Dict[str, Any]) -> Dict[str, Any]:
    """
    Older rows stored department/position/phone as a JSON object inside
    `avatar_url`. Move those values into the typed fields.
    """
    raw = row.get("avatar_url")
    if not isinstance(raw, str) or not raw.lstrip().startswith("{"):
        return row

    try:
        extra = json.loads(raw)
    except ValueError:
        logger.warning(f"Unparseable legacy profile data for user {row.get('id')}")
        return row
    if not isinstance(extra, dict):
        return row

    row = dict(row)
    row["avatar_url"] = None
    for field in LEGACY_PROFILE_FIELDS:
        if not row.get(field) and extra.get(field):
            row[field] = extra[field]
    return row


class UserProfileRepository(BaseRepository[UserProfile]):
    """Repository for UserProfile operations."""

    def __init__(self, client: BackendClient):
        super().__init__(UserProfile, "users", client)

    def to_model(self, row: Dict[str, Any]) -> UserProfile:
        return UserProfile.model_validate(lift_legacy_profile(row))

    async def get_by_email(self, email: str) -> Optional[UserProfile]:
        """Get user by email."""
        return await self.get_by_field("email", email)

    async def list_active(self) -> List[UserProfile]:
        return await self.list(filters={"is_active": True}, order_by="email", order_desc=False)


class CredentialRepository(BaseRepository[UserCredential]):
    """Repository for per-user third-party credentials."""

    def __init__(self, client: BackendClient):
        super().__init__(UserCredential, "user_credentials", client)

    async def get_for_user(self, user_id: uuid.UUID) -> Optional[UserCredential]:
        return await self.get_by_field("user_id", user_id)

    async def delete_for_user(self, user_id: uuid.UUID) -> bool:
        result = await self.query().delete().eq("user_id", user_id).execute()
        return bool(result.data)
