"""
Company service - companies, their channel fallback order and the
per-company figures shown on the dashboard cards.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from staffhub.client import BackendClient
from staffhub.core.exceptions import NotFoundError, raise_not_found, raise_validation_error
from staffhub.models.company import Company, CompanyStatus
from staffhub.repositories.communication_repo import CommunicationLogRepository
from staffhub.repositories.company_repo import CompanyRepository
from staffhub.repositories.employee_repo import EmployeeRepository
from staffhub.schemas.company import CompanyCreate, CompanyUpdate
from staffhub.services import engagement
from staffhub.services.channels import DEFAULT_ORDER, Channel, parse_order, to_config

logger = logging.getLogger(__name__)


def validate_order(names: List[str]) -> List[Channel]:
    """Strict parse of a client-supplied order: unknown names are rejected."""
    order: List[Channel] = []
    for name in names:
        channel = Channel.parse(name)
        if channel is None:
            raise_validation_error(f"Unknown channel '{name}'", "order")
        if channel not in order:
            order.append(channel)
    return order


class CompanyService:
    """Service for company management."""

    def __init__(self, client: BackendClient):
        self.client = client
        self.company_repo = CompanyRepository(client)
        self.employee_repo = EmployeeRepository(client)
        self.log_repo = CommunicationLogRepository(client)

    async def list_companies(self, status: Optional[str] = None) -> List[Company]:
        if status and status not in CompanyStatus.ALL:
            raise_validation_error(f"Unknown status '{status}'", "status")
        return await self.company_repo.list_by_name(status)

    async def get_company(self, company_id: uuid.UUID) -> Company:
        company = await self.company_repo.get(company_id)
        if not company:
            raise_not_found("Company", str(company_id))
        return company

    async def create_company(self, data: CompanyCreate) -> Company:
        """
        Create a company. Without an explicit order it gets the default
        WhatsApp, Telegram, SMS, Email priority.
        """
        order = validate_order(data.fallback_order) if data.fallback_order else list(DEFAULT_ORDER)
        payload = data.model_dump(exclude={"fallback_order"})
        payload["fallback_config"] = to_config(order)

        company = await self.company_repo.create(payload)
        logger.info(f"Company created: {company.name} ({company.id})")
        return company

    async def update_company(self, company_id: uuid.UUID, data: CompanyUpdate) -> Company:
        values = data.model_dump(exclude_unset=True)
        # name and status cannot be cleared
        for field in ("name", "status"):
            if field in values and values[field] is None:
                del values[field]
        if not values:
            return await self.get_company(company_id)

        company = await self.company_repo.update(company_id, values)
        if not company:
            raise_not_found("Company", str(company_id))
        return company

    async def get_fallback_order(self, company_id: uuid.UUID) -> Tuple[List[Channel], bool]:
        """
        Channel priority for a company.

        Returns:
            (order, is_default) - is_default is True when nothing usable is stored
        """
        company = await self.get_company(company_id)
        stored = (company.fallback_config or {}).get("order")
        is_default = not isinstance(stored, list) or not any(Channel.parse(name) for name in stored)
        return parse_order(company.fallback_config), is_default

    async def fallback_order_for(self, company_id: Optional[uuid.UUID]) -> List[Channel]:
        """
        Lenient lookup used when choosing channels: a missing company or
        config falls back to the default order instead of failing the send.
        """
        if not company_id:
            return list(DEFAULT_ORDER)
        try:
            config = await self.company_repo.get_fallback_config(company_id)
        except NotFoundError:
            config = None
        if config is None:
            logger.debug(f"No fallback config for company {company_id}, using default order")
        return parse_order(config)

    async def set_fallback_order(self, company_id: uuid.UUID, names: List[str]) -> List[Channel]:
        order = validate_order(names)
        company = await self.company_repo.set_fallback_config(company_id, to_config(order))
        if not company:
            raise_not_found("Company", str(company_id))
        logger.info(f"Fallback order for company {company_id}: {[c.value for c in order]}")
        return order

    async def company_stats(self, company: Company) -> Dict[str, Any]:
        """Employee count, message counts and engagement for one company."""
        employee_count = await self.employee_repo.count_by_company(company.id)
        activity = await self.log_repo.activity_summary(company.id)

        # Read messages were sent first, so both count towards "sent"
        sent = activity["sent"] + activity["read"]
        figures = engagement.summarize(sent, activity["read"])

        return {
            "id": company.id,
            "name": company.name,
            "industry": company.industry,
            "status": company.status,
            "employee_count": employee_count,
            "sent_messages": sent,
            "read_messages": activity["read"],
            "scheduled_messages": activity["scheduled"],
            "draft_messages": activity["draft"],
            "next_scheduled_at": activity["next_scheduled_at"],
            "fallback_order": [c.value for c in parse_order(company.fallback_config)],
            "created_at": company.created_at,
            **figures,
        }

    async def list_with_stats(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        """All companies with their dashboard figures, alphabetically."""
        companies = await self.list_companies(status)
        return [await self.company_stats(company) for company in companies]
