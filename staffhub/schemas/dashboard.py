"""
Dashboard schemas.
"""
from pydantic import BaseModel


class DashboardStatsResponse(BaseModel):
    companies: int
    employees: int
    folders: int
    documents: int
    communications: int
    monthly_growth: int  # % of employees added in the last 30 days
    success_rate: int  # % of communications sent or read
