"""
Communication models - message logs and their analysis.
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field


class MessageStatus:
    SENT = "sent"
    READ = "read"
    SCHEDULED = "scheduled"
    DRAFT = "draft"
    FAILED = "failed"

    ALL = (SENT, READ, SCHEDULED, DRAFT, FAILED)


class CommunicationLog(SQLModel):
    """
    One message to one employee.
    Read/sent counts per company feed the engagement score.
    """
    id: uuid.UUID
    company_id: Optional[uuid.UUID] = None
    employee_id: Optional[uuid.UUID] = None
    sender_id: Optional[uuid.UUID] = None

    # Message content
    channel: Optional[str] = None  # WhatsApp, Telegram, SMS, Email
    subject: Optional[str] = None
    message: Optional[str] = None

    # Status
    status: str = Field(default=MessageStatus.SENT)
    scheduled_at: Optional[datetime] = None

    # Analysis
    sentiment_score: Optional[float] = None
    sentiment_label: Optional[str] = None

    # Flattened joins
    company_name: Optional[str] = None
    employee_name: Optional[str] = None

    created_at: Optional[datetime] = None


class MessageAnalysis(SQLModel):
    """Stored result of analysing a message's sentiment."""
    id: Optional[uuid.UUID] = None
    log_id: Optional[uuid.UUID] = None
    company_id: Optional[uuid.UUID] = None
    sentiment_score: float
    sentiment_label: str
    confidence: Optional[float] = None
    summary: Optional[str] = None
    created_at: Optional[datetime] = None
