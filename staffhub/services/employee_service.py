"""
Employee service - directory listing, contact channels and the channel
an employee would be reached on.
"""
import logging
import uuid
from typing import Any, Dict, Optional

from staffhub.client import BackendClient
from staffhub.core.exceptions import raise_not_found
from staffhub.models.employee import Employee
from staffhub.repositories.employee_repo import EmployeeRepository
from staffhub.schemas.employee import EmployeeChannelsUpdate
from staffhub.services.channels import contact_address, select_channel, usable_channels
from staffhub.services.company_service import CompanyService

logger = logging.getLogger(__name__)


class EmployeeService:
    """Service for employee operations."""

    def __init__(self, client: BackendClient):
        self.client = client
        self.employee_repo = EmployeeRepository(client)
        self.company_service = CompanyService(client)

    async def list_employees(
        self,
        company_id: Optional[uuid.UUID] = None,
        is_active: Optional[bool] = None,
        text_filters: Optional[Dict[str, Optional[str]]] = None,
        page: int = 1,
        limit: int = 50
    ) -> dict:
        return await self.employee_repo.search(
            company_id=company_id,
            is_active=is_active,
            text_filters=text_filters,
            page=page,
            limit=limit
        )

    async def get_employee(self, employee_id: uuid.UUID) -> Employee:
        employee = await self.employee_repo.get(employee_id)
        if not employee:
            raise_not_found("Employee", str(employee_id))
        return employee

    async def count_employees(self, company_id: Optional[uuid.UUID] = None) -> int:
        if company_id:
            return await self.employee_repo.count_by_company(company_id)
        return await self.employee_repo.count()

    async def update_channels(self, employee_id: uuid.UUID, data: EmployeeChannelsUpdate) -> Employee:
        """
        Change contact values and per-channel switches.

        Omitted fields are kept and explicit nulls clear the stored value.
        """
        values = data.model_dump(exclude_unset=True)
        if values.get("telegram_username") is not None:
            values["telegram_username"] = values["telegram_username"].strip().lstrip("@") or None
        if not values:
            return await self.get_employee(employee_id)

        employee = await self.employee_repo.update(employee_id, values)
        if not employee:
            raise_not_found("Employee", str(employee_id))
        logger.info(f"Updated channels for employee {employee_id}: {sorted(values)}")
        return employee

    async def preferred_channel(self, employee_id: uuid.UUID) -> Dict[str, Any]:
        """The channel a message to this employee would go out on, and why."""
        employee = await self.get_employee(employee_id)
        order = await self.company_service.fallback_order_for(employee.company_id)
        channel = select_channel(employee, order)

        return {
            "employee_id": employee.id,
            "channel": channel.value,
            "address": contact_address(employee, channel),
            "usable_channels": [c.value for c in usable_channels(employee, order)],
            "order": [c.value for c in order],
        }
