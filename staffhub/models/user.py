"""
User profile model.
Authentication lives in the hosted identity service; this is the `users`
table profile keyed by the identity's id.
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field


class UserProfile(SQLModel):
    id: uuid.UUID
    email: str
    full_name: Optional[str] = None
    role: str = Field(default="user")  # user, admin
    company_id: Optional[uuid.UUID] = None

    # Profile details (typed; legacy rows carried these as JSON in avatar_url)
    department: Optional[str] = None
    position: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None

    is_active: bool = Field(default=True)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
