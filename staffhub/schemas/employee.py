"""
Employee schemas.
"""
import uuid
from typing import Optional, List
from pydantic import BaseModel


class EmployeeChannelsUpdate(BaseModel):
    """Update an employee's contact channels. Omitted fields stay as they are."""
    phone: Optional[str] = None
    whatsapp_phone: Optional[str] = None
    whatsapp_enabled: Optional[bool] = None
    sms_phone: Optional[str] = None
    sms_enabled: Optional[bool] = None
    telegram_username: Optional[str] = None
    telegram_enabled: Optional[bool] = None
    email_enabled: Optional[bool] = None
    mailing_list: Optional[bool] = None


class PreferredChannelResponse(BaseModel):
    employee_id: uuid.UUID
    channel: str
    address: Optional[str] = None
    usable_channels: List[str]
    order: List[str]


class EmployeeCountResponse(BaseModel):
    total: int
    company_id: Optional[uuid.UUID] = None
