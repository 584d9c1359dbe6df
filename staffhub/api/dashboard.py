"""
Dashboard API routes.
"""
from fastapi import APIRouter, Depends

from staffhub.api.deps import get_user_backend
from staffhub.client import BackendClient
from staffhub.schemas.dashboard import DashboardStatsResponse
from staffhub.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStatsResponse)
async def get_dashboard_stats(backend: BackendClient = Depends(get_user_backend)):
    """Get dashboard statistics."""
    return await DashboardService(backend).get_stats()
