"""
Communication schemas.
"""
import uuid
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field


class SendMessageRequest(BaseModel):
    """
    Send a message to employees.
    Without `channel`, each recipient gets their company's first usable channel.
    """
    recipient_ids: List[uuid.UUID] = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    subject: Optional[str] = None
    channel: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    draft: bool = False

    class Config:
        json_schema_extra = {
            "example": {
                "recipient_ids": ["6f1c1e0a-4b8e-4a43-9d5e-2f0f4b1c9a10"],
                "message": "Recordatorio: reunión general el viernes a las 10:00",
                "subject": "Reunión general"
            }
        }


class MessageAnalysisRequest(BaseModel):
    """Sentiment analysis result to store against a message."""
    sentiment_score: float = Field(..., ge=-1, le=1)
    sentiment_label: Optional[str] = Field(None, pattern="^(positive|negative|neutral)$")
    confidence: Optional[float] = Field(None, ge=0, le=1)
    summary: Optional[str] = None


class DeliveryResult(BaseModel):
    employee_id: uuid.UUID
    channel: Optional[str] = None
    address: Optional[str] = None
    status: str
    log_id: Optional[uuid.UUID] = None


class SendMessageResponse(BaseModel):
    status: str
    sent: int
    skipped: int
    results: List[DeliveryResult]
