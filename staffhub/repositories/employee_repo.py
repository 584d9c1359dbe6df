"""
Employee repository.
Employees are read with their company joined in and flattened.
"""
import uuid
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from staffhub.client import BackendClient
from staffhub.models.employee import Employee
from staffhub.repositories.base import BaseRepository

# Free-text columns filtered with a case-insensitive substring match
TEXT_FILTERS = ("department", "position", "region", "level", "work_mode", "contract_type")


def flatten_company(row: Dict[str, Any]) -> Dict[str, Any]:
    """Lift the nested `companies` join into company_name/company_industry."""
    row = dict(row)
    company = row.pop("companies", None)
    if isinstance(company, list):
        company = company[0] if company else None
    if isinstance(company, dict):
        row.setdefault("company_name", company.get("name"))
        row.setdefault("company_industry", company.get("industry"))
    return row


class EmployeeRepository(BaseRepository[Employee]):
    """Repository for Employee operations."""

    select_columns = "*, companies:company_id(id, name, industry)"

    def __init__(self, client: BackendClient):
        super().__init__(Employee, "employees", client)

    def to_model(self, row: Dict[str, Any]) -> Employee:
        return Employee.model_validate(flatten_company(row))

    async def search(
        self,
        company_id: Optional[uuid.UUID] = None,
        is_active: Optional[bool] = None,
        text_filters: Optional[Dict[str, Optional[str]]] = None,
        page: int = 1,
        limit: int = 50
    ) -> dict:
        """Paginated employee listing with exact and substring filters."""
        query = self.query().select(self.select_columns, count="exact")
        if company_id:
            query = query.eq("company_id", company_id)
        if is_active is not None:
            query = query.eq("is_active", is_active)
        for column, value in (text_filters or {}).items():
            if column in TEXT_FILTERS and value:
                query = query.ilike(column, f"*{value}*")

        return await self.list_paginated(
            page=page,
            limit=limit,
            order_by="last_name",
            order_desc=False,
            query=query
        )

    async def list_by_company(self, company_id: uuid.UUID) -> List[Employee]:
        return await self.list(
            filters={"company_id": company_id},
            order_by="last_name",
            order_desc=False
        )

    async def list_by_ids(self, ids: Iterable[uuid.UUID]) -> List[Employee]:
        ids = list(ids)
        if not ids:
            return []
        result = await (
            self.query()
            .select(self.select_columns)
            .in_("id", ids)
            .execute()
        )
        return self.to_models(result.data)

    async def count_by_company(self, company_id: uuid.UUID) -> int:
        return await self.count({"company_id": company_id})

    async def count_created_since(self, since: datetime) -> int:
        result = await (
            self.query()
            .select("id", count="exact", head=True)
            .gte("created_at", since)
            .execute()
        )
        return result.count or 0
