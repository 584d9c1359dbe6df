"""
Communication log and message analysis repositories.
"""
import uuid
from typing import Any, Dict, Iterable, List, Optional

from staffhub.client import BackendClient
from staffhub.models.communication import CommunicationLog, MessageAnalysis, MessageStatus
from staffhub.repositories.base import BaseRepository, utcnow_iso


def flatten_log(row: Dict[str, Any]) -> Dict[str, Any]:
    """Lift the company and employee joins into flat name fields."""
    row = dict(row)
    company = row.pop("companies", None)
    employee = row.pop("employees", None)
    if isinstance(company, dict):
        row.setdefault("company_name", company.get("name"))
    if isinstance(employee, dict):
        name = " ".join(p for p in (employee.get("first_name"), employee.get("last_name")) if p)
        row.setdefault("employee_name", name or None)
    return row


class CommunicationLogRepository(BaseRepository[CommunicationLog]):
    """Repository for CommunicationLog operations."""

    select_columns = (
        "*, companies:company_id(id, name), "
        "employees:employee_id(id, first_name, last_name)"
    )
    timestamp_fields = ("created_at",)

    def __init__(self, client: BackendClient):
        super().__init__(CommunicationLog, "communication_logs", client)

    def to_model(self, row: Dict[str, Any]) -> CommunicationLog:
        return CommunicationLog.model_validate(flatten_log(row))

    async def list_logs(
        self,
        company_id: Optional[uuid.UUID] = None,
        employee_id: Optional[uuid.UUID] = None,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 20
    ) -> dict:
        """Newest logs first."""
        return await self.list_paginated(
            filters={"company_id": company_id, "employee_id": employee_id, "status": status},
            page=page,
            limit=limit,
            order_by="created_at",
            order_desc=True
        )

    async def activity_summary(self, company_id: Optional[uuid.UUID] = None) -> Dict[str, Any]:
        """
        Count logs per status and find the earliest scheduled message.

        Returns:
            {"sent": int, "read": int, "scheduled": int, "draft": int,
             "failed": int, "total": int, "next_scheduled_at": str | None}
        """
        # Counted server-side; row reads are capped by the platform's max_rows
        filters = {"company_id": company_id}
        summary: Dict[str, Any] = {}
        for status in MessageStatus.ALL:
            summary[status] = await self.count({**filters, "status": status})
        summary["total"] = await self.count(filters)

        query = self._apply_filters(
            self.query().select("scheduled_at,created_at"),
            {**filters, "status": MessageStatus.SCHEDULED},
        )
        result = await query.order("scheduled_at").limit(1).execute()
        rows = result.data or []
        summary["next_scheduled_at"] = (
            (rows[0].get("scheduled_at") or rows[0].get("created_at")) if rows else None
        )
        return summary

    async def count_with_status(self, statuses: Iterable[str]) -> int:
        result = await (
            self.query()
            .select("id", count="exact", head=True)
            .in_("status", list(statuses))
            .execute()
        )
        return result.count or 0

    async def create_many(self, rows: List[Dict[str, Any]]) -> List[CommunicationLog]:
        """Insert several logs in one call."""
        if not rows:
            return []
        now = utcnow_iso()
        rows = [{"created_at": now, **row} for row in rows]
        result = await self.query().insert(rows).select(self.select_columns).execute()
        return self.to_models(result.data)

    async def set_status(self, log_id: uuid.UUID, status: str) -> Optional[CommunicationLog]:
        return await self.update(log_id, {"status": status})

    async def set_sentiment(self, log_id: uuid.UUID, score: float, label: str) -> Optional[CommunicationLog]:
        return await self.update(log_id, {"sentiment_score": score, "sentiment_label": label})


class MessageAnalysisRepository(BaseRepository[MessageAnalysis]):
    """Repository for MessageAnalysis records."""

    timestamp_fields = ("created_at",)

    def __init__(self, client: BackendClient):
        super().__init__(MessageAnalysis, "message_analysis", client)
