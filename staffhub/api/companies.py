"""
Company API routes.
Handles companies, their dashboard figures and channel fallback order.
"""
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from staffhub.api.deps import get_user_backend
from staffhub.client import BackendClient
from staffhub.models.company import Company
from staffhub.schemas.company import (
    CompanyCreate,
    CompanyStatsResponse,
    CompanyUpdate,
    FallbackOrderResponse,
    FallbackOrderUpdate,
)
from staffhub.services.company_service import CompanyService

router = APIRouter(prefix="/companies", tags=["companies"])


@router.get("/", response_model=List[Company])
async def list_companies(
    status: Optional[str] = Query(None, description="active or inactive"),
    backend: BackendClient = Depends(get_user_backend)
):
    """List companies alphabetically."""
    return await CompanyService(backend).list_companies(status)


@router.get("/stats", response_model=List[CompanyStatsResponse])
async def list_companies_with_stats(
    status: Optional[str] = Query(None),
    backend: BackendClient = Depends(get_user_backend)
):
    """
    Companies with employee counts, message counts and engagement score.
    Feeds the company cards of the dashboard.
    """
    return await CompanyService(backend).list_with_stats(status)


@router.post("/", response_model=Company, status_code=201)
async def create_company(
    request: CompanyCreate,
    backend: BackendClient = Depends(get_user_backend)
):
    """Create a company. Fallback order defaults to WhatsApp, Telegram, SMS, Email."""
    return await CompanyService(backend).create_company(request)


@router.get("/{company_id}", response_model=Company)
async def get_company(
    company_id: uuid.UUID,
    backend: BackendClient = Depends(get_user_backend)
):
    return await CompanyService(backend).get_company(company_id)


@router.patch("/{company_id}", response_model=Company)
async def update_company(
    company_id: uuid.UUID,
    request: CompanyUpdate,
    backend: BackendClient = Depends(get_user_backend)
):
    """Rename a company or change its status."""
    return await CompanyService(backend).update_company(company_id, request)


@router.get("/{company_id}/fallback-order", response_model=FallbackOrderResponse)
async def get_fallback_order(
    company_id: uuid.UUID,
    backend: BackendClient = Depends(get_user_backend)
):
    order, is_default = await CompanyService(backend).get_fallback_order(company_id)
    return {
        "company_id": company_id,
        "order": [channel.value for channel in order],
        "is_default": is_default,
    }


@router.put("/{company_id}/fallback-order", response_model=FallbackOrderResponse)
async def set_fallback_order(
    company_id: uuid.UUID,
    request: FallbackOrderUpdate,
    backend: BackendClient = Depends(get_user_backend)
):
    """Replace the channel priority. Unknown channel names are rejected."""
    order = await CompanyService(backend).set_fallback_order(company_id, request.order)
    return {
        "company_id": company_id,
        "order": [channel.value for channel in order],
        "is_default": False,
    }
