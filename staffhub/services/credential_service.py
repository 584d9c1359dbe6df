"""
Credential service - state of a user's Google Drive connection.
"""
import logging
import uuid

from staffhub.client import BackendClient
from staffhub.repositories.user_repo import CredentialRepository

logger = logging.getLogger(__name__)


class CredentialService:

    def __init__(self, client: BackendClient):
        self.credential_repo = CredentialRepository(client)

    async def google_drive_status(self, user_id: uuid.UUID) -> dict:
        """Which Google tokens are stored. Token values are never returned."""
        credential = await self.credential_repo.get_for_user(user_id)
        if not credential:
            return {"connected": False, "has_refresh_token": False, "has_access_token": False}
        return {
            "connected": credential.google_drive_connected,
            "has_refresh_token": bool(credential.google_refresh_token),
            "has_access_token": bool(credential.google_access_token),
            "updated_at": credential.updated_at,
        }

    async def disconnect_google_drive(self, user_id: uuid.UUID) -> bool:
        removed = await self.credential_repo.delete_for_user(user_id)
        if removed:
            logger.info(f"Google Drive disconnected for user {user_id}")
        return removed
