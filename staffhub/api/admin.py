"""
Admin API routes - user management with the service key.
Only mounted when FEATURE_ADMIN_API is on; every route needs the admin role.
"""
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query

from staffhub.api.deps import CurrentUser, get_service_backend, require_admin
from staffhub.client import BackendClient
from staffhub.schemas.auth import AdminUserUpdate
from staffhub.schemas.common import MessageResponse
from staffhub.services.admin_service import AdminService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users")
async def list_users(
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=1000),
    admin: CurrentUser = Depends(require_admin),
    backend: BackendClient = Depends(get_service_backend)
):
    users = await AdminService(backend).list_users(page=page, per_page=per_page)
    return {"users": users, "page": page, "count": len(users)}


@router.patch("/users/{user_id}")
async def update_user(
    user_id: str,
    request: AdminUserUpdate,
    admin: CurrentUser = Depends(require_admin),
    backend: BackendClient = Depends(get_service_backend)
):
    """Change email, password, name, role or ban of a user."""
    return await AdminService(backend).update_user(user_id, request)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    admin: CurrentUser = Depends(require_admin),
    backend: BackendClient = Depends(get_service_backend)
):
    await AdminService(backend).delete_user(user_id)
    return {"message": "User deleted"}


@router.post("/users/{user_id}/confirm-email")
async def confirm_email(
    user_id: str,
    admin: CurrentUser = Depends(require_admin),
    backend: BackendClient = Depends(get_service_backend)
):
    """Confirm a user's email without the confirmation mail."""
    return await AdminService(backend).confirm_email(user_id)


@router.post("/users/{user_id}/temporary-password")
async def set_temporary_password(
    user_id: str,
    password: Optional[str] = Body(None, embed=True, min_length=6),
    admin: CurrentUser = Depends(require_admin),
    backend: BackendClient = Depends(get_service_backend)
):
    """Set a temporary password; one is generated when none is given."""
    return await AdminService(backend).set_temporary_password(user_id, password)
