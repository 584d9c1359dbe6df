"""
Dashboard service - headline counts across the whole workspace.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Dict

from staffhub.client import BackendClient
from staffhub.core.exceptions import NotFoundError
from staffhub.models.communication import MessageStatus
from staffhub.repositories.communication_repo import CommunicationLogRepository
from staffhub.repositories.employee_repo import EmployeeRepository

logger = logging.getLogger(__name__)

GROWTH_WINDOW_DAYS = 30

# Tables counted as-is; a table the backend does not expose counts as empty
COUNTED_TABLES = {
    "companies": "companies",
    "employees": "employees",
    "folders": "folders",
    "documents": "documents",
    "communications": "communication_logs",
}


def percentage(part: int, total: int) -> int:
    if total <= 0:
        return 0
    return round(part / total * 100)


class DashboardService:
    """Service for the dashboard summary."""

    def __init__(self, client: BackendClient):
        self.client = client
        self.employee_repo = EmployeeRepository(client)
        self.log_repo = CommunicationLogRepository(client)

    async def count_table(self, table: str) -> int:
        try:
            result = await self.client.table(table).select("id", count="exact", head=True).execute()
        except NotFoundError:
            logger.warning(f"Table '{table}' not available, counting it as empty")
            return 0
        return result.count or 0

    async def get_stats(self) -> Dict[str, int]:
        """
        Workspace counts, monthly growth and message success rate.

        monthly_growth: % of employees created in the last 30 days
        success_rate: % of communication logs that were sent or read
        """
        stats = {}
        for key, table in COUNTED_TABLES.items():
            stats[key] = await self.count_table(table)

        since = datetime.now(timezone.utc) - timedelta(days=GROWTH_WINDOW_DAYS)
        new_employees = await self.employee_repo.count_created_since(since) if stats["employees"] else 0
        delivered = (
            await self.log_repo.count_with_status([MessageStatus.SENT, MessageStatus.READ])
            if stats["communications"] else 0
        )

        stats["monthly_growth"] = percentage(new_employees, stats["employees"])
        stats["success_rate"] = percentage(delivered, stats["communications"])
        return stats
