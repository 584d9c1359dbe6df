"""
Employee model.
Contact attributes are explicit optional fields; absence is a normal value.
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field


class Employee(SQLModel):
    """
    Record of the hosted `employees` table, with the owning company's
    name flattened in from the join.
    """
    id: uuid.UUID
    company_id: Optional[uuid.UUID] = None
    company_name: Optional[str] = None
    company_industry: Optional[str] = None

    # Identity
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    # Organization
    department: Optional[str] = None
    position: Optional[str] = None
    region: Optional[str] = None
    level: Optional[str] = None
    work_mode: Optional[str] = None
    contract_type: Optional[str] = None
    is_active: bool = Field(default=True)

    # Communication channels
    whatsapp_phone: Optional[str] = None
    whatsapp_enabled: Optional[bool] = None
    sms_phone: Optional[str] = None
    sms_enabled: Optional[bool] = None
    telegram_username: Optional[str] = None
    telegram_enabled: Optional[bool] = None
    email_enabled: Optional[bool] = None
    mailing_list: Optional[bool] = None

    # Timestamps
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) if parts else (self.email or "")
