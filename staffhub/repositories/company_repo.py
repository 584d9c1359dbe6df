"""
Company repository.
"""
import uuid
from typing import Any, Dict, List, Optional

from staffhub.client import BackendClient
from staffhub.models.company import Company
from staffhub.repositories.base import BaseRepository


class CompanyRepository(BaseRepository[Company]):
    """Repository for Company operations."""

    def __init__(self, client: BackendClient):
        super().__init__(Company, "companies", client)

    async def list_by_name(self, status: Optional[str] = None) -> List[Company]:
        """All companies alphabetically, optionally only one status."""
        return await self.list(
            filters={"status": status},
            order_by="name",
            order_desc=False
        )

    async def get_by_name(self, name: str) -> Optional[Company]:
        return await self.get_by_field("name", name)

    async def get_fallback_config(self, company_id: uuid.UUID) -> Optional[Dict[str, Any]]:
        """Stored fallback config, or None if the company or config is missing."""
        result = await (
            self.query()
            .select("id,fallback_config")
            .eq("id", company_id)
            .maybe_single()
            .execute()
        )
        if not result.data:
            return None
        return result.data.get("fallback_config")

    async def set_fallback_config(self, company_id: uuid.UUID, config: Dict[str, Any]) -> Optional[Company]:
        return await self.update(company_id, {"fallback_config": config})
