"""
Company schemas for API requests/responses.
"""
import uuid
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class CompanyCreate(BaseModel):
    """Request to create a company."""
    name: str = Field(..., min_length=1, max_length=200)
    industry: Optional[str] = None
    description: Optional[str] = None
    status: str = Field(default="active", pattern="^(active|inactive)$")
    fallback_order: Optional[List[str]] = None

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Copec",
                "industry": "Energy",
                "fallback_order": ["WhatsApp", "Telegram", "SMS", "Email"]
            }
        }


class CompanyUpdate(BaseModel):
    """Rename a company or change its status."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    industry: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = Field(None, pattern="^(active|inactive)$")


class FallbackOrderUpdate(BaseModel):
    """New channel priority for a company."""
    order: List[str] = Field(..., min_length=1)


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class FallbackOrderResponse(BaseModel):
    company_id: uuid.UUID
    order: List[str]
    is_default: bool


class CompanyStatsResponse(BaseModel):
    """Company with employee and message figures for the dashboard cards."""
    id: uuid.UUID
    name: str
    industry: Optional[str] = None
    status: str
    employee_count: int
    sent_messages: int
    read_messages: int
    scheduled_messages: int
    draft_messages: int
    next_scheduled_at: Optional[str] = None
    sentiment_score: float
    sentiment_label: str
    engagement_band: str
    read_rate: int
    fallback_order: List[str]
    created_at: Optional[datetime] = None
