"""
Third-party OAuth credentials per user (Google Drive).
Tokens are opaque to the app; only their presence matters.
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel


class UserCredential(SQLModel):
    user_id: uuid.UUID
    google_access_token: Optional[str] = None
    google_refresh_token: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def google_drive_connected(self) -> bool:
        return bool(self.google_refresh_token or self.google_access_token)
