"""
Communication API routes.
"""
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query

from staffhub.api.deps import CurrentUser, get_current_user, get_settings, get_user_backend
from staffhub.client import BackendClient
from staffhub.config import Settings
from staffhub.core.exceptions import raise_forbidden
from staffhub.core.pagination import PaginatedResponse
from staffhub.models.communication import CommunicationLog, MessageAnalysis
from staffhub.schemas.communication import (
    MessageAnalysisRequest,
    SendMessageRequest,
    SendMessageResponse,
)
from staffhub.services.communication_service import CommunicationService

router = APIRouter(prefix="/communications", tags=["communications"])


@router.post("/send", response_model=SendMessageResponse)
async def send_message(
    request: SendMessageRequest,
    current_user: CurrentUser = Depends(get_current_user),
    backend: BackendClient = Depends(get_user_backend),
    settings: Settings = Depends(get_settings)
):
    """
    Send a message to employees.
    Each recipient gets their company's first usable channel unless
    `channel` forces one.
    """
    if not settings.FEATURE_MESSAGE_SENDING:
        raise_forbidden("Message sending is disabled")
    return await CommunicationService(backend).send_message(request, sender_id=current_user.id)


@router.get("/logs", response_model=PaginatedResponse[CommunicationLog])
async def list_logs(
    company_id: Optional[uuid.UUID] = Query(None),
    employee_id: Optional[uuid.UUID] = Query(None),
    status: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=200),
    backend: BackendClient = Depends(get_user_backend)
):
    """Communication logs, newest first."""
    return await CommunicationService(backend).list_logs(
        company_id=company_id,
        employee_id=employee_id,
        status=status,
        page=page,
        limit=limit
    )


@router.get("/stats")
async def get_stats(
    company_id: Optional[uuid.UUID] = Query(None),
    backend: BackendClient = Depends(get_user_backend)
):
    """Per-status counts, next scheduled send and engagement score."""
    return await CommunicationService(backend).get_stats(company_id)


@router.post("/logs/{log_id}/read", response_model=CommunicationLog)
async def mark_read(
    log_id: uuid.UUID,
    backend: BackendClient = Depends(get_user_backend)
):
    return await CommunicationService(backend).mark_read(log_id)


@router.post("/logs/{log_id}/analysis", response_model=MessageAnalysis, status_code=201)
async def save_analysis(
    log_id: uuid.UUID,
    request: MessageAnalysisRequest,
    backend: BackendClient = Depends(get_user_backend)
):
    """Store a sentiment analysis result for a message."""
    return await CommunicationService(backend).save_message_analysis(log_id, request)
