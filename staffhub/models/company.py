"""
Company model.
Companies own employees, communication logs and a channel fallback order.
"""
import uuid
from datetime import datetime
from typing import Optional, Dict, Any

from sqlmodel import SQLModel, Field


class CompanyStatus:
    ACTIVE = "active"
    INACTIVE = "inactive"

    ALL = (ACTIVE, INACTIVE)


class Company(SQLModel):
    """
    Record of the hosted `companies` table.
    `fallback_config` holds the channel priority, e.g. {"order": ["WhatsApp", "Email"]}.
    """
    id: uuid.UUID
    name: str
    industry: Optional[str] = None
    description: Optional[str] = None
    status: str = Field(default=CompanyStatus.ACTIVE)

    fallback_config: Optional[Dict[str, Any]] = None

    # Timestamps
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == CompanyStatus.ACTIVE
