"""
Employee API routes.
"""
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query

from staffhub.api.deps import get_user_backend
from staffhub.client import BackendClient
from staffhub.core.pagination import PaginatedResponse
from staffhub.models.employee import Employee
from staffhub.schemas.employee import (
    EmployeeChannelsUpdate,
    EmployeeCountResponse,
    PreferredChannelResponse,
)
from staffhub.services.employee_service import EmployeeService

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("/", response_model=PaginatedResponse[Employee])
async def list_employees(
    company_id: Optional[uuid.UUID] = Query(None),
    is_active: Optional[bool] = Query(None),
    department: Optional[str] = Query(None),
    position: Optional[str] = Query(None),
    region: Optional[str] = Query(None),
    level: Optional[str] = Query(None),
    work_mode: Optional[str] = Query(None),
    contract_type: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    backend: BackendClient = Depends(get_user_backend)
):
    """
    List employees with filters and pagination.
    Text filters match case-insensitively anywhere in the value.
    """
    return await EmployeeService(backend).list_employees(
        company_id=company_id,
        is_active=is_active,
        text_filters={
            "department": department,
            "position": position,
            "region": region,
            "level": level,
            "work_mode": work_mode,
            "contract_type": contract_type,
        },
        page=page,
        limit=limit
    )


@router.get("/count", response_model=EmployeeCountResponse)
async def count_employees(
    company_id: Optional[uuid.UUID] = Query(None),
    backend: BackendClient = Depends(get_user_backend)
):
    total = await EmployeeService(backend).count_employees(company_id)
    return {"total": total, "company_id": company_id}


@router.get("/{employee_id}", response_model=Employee)
async def get_employee(
    employee_id: uuid.UUID,
    backend: BackendClient = Depends(get_user_backend)
):
    return await EmployeeService(backend).get_employee(employee_id)


@router.patch("/{employee_id}/channels", response_model=Employee)
async def update_employee_channels(
    employee_id: uuid.UUID,
    request: EmployeeChannelsUpdate,
    backend: BackendClient = Depends(get_user_backend)
):
    """Update contact values and enable or disable channels."""
    return await EmployeeService(backend).update_channels(employee_id, request)


@router.get("/{employee_id}/preferred-channel", response_model=PreferredChannelResponse)
async def get_preferred_channel(
    employee_id: uuid.UUID,
    backend: BackendClient = Depends(get_user_backend)
):
    """Channel a message would go out on, using the company's fallback order."""
    return await EmployeeService(backend).preferred_channel(employee_id)
