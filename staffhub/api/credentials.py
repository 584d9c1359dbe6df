"""
Third-party credential routes (Google Drive).
"""
from fastapi import APIRouter, Depends

from staffhub.api.deps import CurrentUser, get_current_user, get_user_backend
from staffhub.client import BackendClient
from staffhub.schemas.common import MessageResponse
from staffhub.schemas.credential import GoogleDriveStatusResponse
from staffhub.services.credential_service import CredentialService

router = APIRouter(prefix="/credentials", tags=["credentials"])


@router.get("/google-drive", response_model=GoogleDriveStatusResponse)
async def google_drive_status(
    current_user: CurrentUser = Depends(get_current_user),
    backend: BackendClient = Depends(get_user_backend)
):
    """Whether the current user has connected Google Drive."""
    return await CredentialService(backend).google_drive_status(current_user.id)


@router.delete("/google-drive", response_model=MessageResponse)
async def disconnect_google_drive(
    current_user: CurrentUser = Depends(get_current_user),
    backend: BackendClient = Depends(get_user_backend)
):
    removed = await CredentialService(backend).disconnect_google_drive(current_user.id)
    if not removed:
        return {"message": "Google Drive was not connected"}
    return {"message": "Google Drive disconnected"}
