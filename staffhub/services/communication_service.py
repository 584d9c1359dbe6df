"""
Communication service - recording outgoing messages, their status and
their sentiment analysis.

Sending records one communication log per reachable recipient. Delivery to
the messaging providers themselves happens outside this API.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from staffhub.client import BackendClient
from staffhub.core.exceptions import raise_not_found, raise_validation_error
from staffhub.models.communication import CommunicationLog, MessageAnalysis, MessageStatus
from staffhub.repositories.communication_repo import (
    CommunicationLogRepository,
    MessageAnalysisRepository,
)
from staffhub.repositories.employee_repo import EmployeeRepository
from staffhub.schemas.communication import MessageAnalysisRequest, SendMessageRequest
from staffhub.services import engagement
from staffhub.services.channels import Channel, contact_address, select_channel
from staffhub.services.company_service import CompanyService

logger = logging.getLogger(__name__)

SKIPPED_NOT_FOUND = "not_found"
SKIPPED_UNREACHABLE = "unreachable"


def delivery_status(request: SendMessageRequest, now: Optional[datetime] = None) -> str:
    """draft, scheduled (future send time) or sent."""
    if request.draft:
        return MessageStatus.DRAFT
    if request.scheduled_at:
        now = now or datetime.now(timezone.utc)
        when = request.scheduled_at
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)
        if when > now:
            return MessageStatus.SCHEDULED
    return MessageStatus.SENT


class CommunicationService:
    """Service for communication logs."""

    def __init__(self, client: BackendClient):
        self.client = client
        self.log_repo = CommunicationLogRepository(client)
        self.analysis_repo = MessageAnalysisRepository(client)
        self.employee_repo = EmployeeRepository(client)
        self.company_service = CompanyService(client)

    async def send_message(
        self,
        request: SendMessageRequest,
        sender_id: Optional[uuid.UUID] = None
    ) -> Dict[str, Any]:
        """
        Record a message for each recipient on the channel they will get it on.

        Without a forced channel each recipient gets the first usable channel
        of their company's fallback order. Recipients that do not exist, or
        cannot be reached on the chosen channel, are reported as skipped.
        """
        forced: Optional[Channel] = None
        if request.channel:
            forced = Channel.parse(request.channel)
            if forced is None:
                raise_validation_error(f"Unknown channel '{request.channel}'", "channel")

        status = delivery_status(request)
        # Each employee gets one message however often they are listed
        recipient_ids = list(dict.fromkeys(request.recipient_ids))
        employees = {e.id: e for e in await self.employee_repo.list_by_ids(recipient_ids)}
        orders: Dict[Optional[uuid.UUID], List[Channel]] = {}

        results: List[Dict[str, Any]] = []
        rows: List[Dict[str, Any]] = []
        for employee_id in recipient_ids:
            employee = employees.get(employee_id)
            if employee is None:
                logger.warning(f"Recipient {employee_id} not found, skipping")
                results.append({"employee_id": employee_id, "status": SKIPPED_NOT_FOUND})
                continue

            if forced:
                channel = forced
            else:
                if employee.company_id not in orders:
                    orders[employee.company_id] = await self.company_service.fallback_order_for(
                        employee.company_id
                    )
                channel = select_channel(employee, orders[employee.company_id])

            address = contact_address(employee, channel)
            if address is None:
                logger.info(f"Employee {employee_id} has no usable {channel.value} contact, skipping")
                results.append({
                    "employee_id": employee_id,
                    "channel": channel.value,
                    "status": SKIPPED_UNREACHABLE,
                })
                continue

            rows.append({
                "company_id": str(employee.company_id) if employee.company_id else None,
                "employee_id": str(employee.id),
                "sender_id": str(sender_id) if sender_id else None,
                "channel": channel.value,
                "subject": request.subject,
                "message": request.message,
                "status": status,
                "scheduled_at": request.scheduled_at.isoformat() if request.scheduled_at else None,
            })
            results.append({
                "employee_id": employee_id,
                "channel": channel.value,
                "address": address,
                "status": status,
            })

        logs = await self.log_repo.create_many(rows)
        log_ids = {log.employee_id: log.id for log in logs}
        for result in results:
            if result["status"] == status:
                result["log_id"] = log_ids.get(result["employee_id"])

        skipped = len(results) - len(rows)
        logger.info(f"Message recorded for {len(rows)} recipients ({status}), {skipped} skipped")
        return {"status": status, "sent": len(rows), "skipped": skipped, "results": results}

    async def list_logs(
        self,
        company_id: Optional[uuid.UUID] = None,
        employee_id: Optional[uuid.UUID] = None,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 20
    ) -> dict:
        if status and status not in MessageStatus.ALL:
            raise_validation_error(f"Unknown status '{status}'", "status")
        return await self.log_repo.list_logs(
            company_id=company_id,
            employee_id=employee_id,
            status=status,
            page=page,
            limit=limit
        )

    async def get_stats(self, company_id: Optional[uuid.UUID] = None) -> Dict[str, Any]:
        """Per-status counts plus engagement, for one company or all of them."""
        summary = await self.log_repo.activity_summary(company_id)
        sent = summary["sent"] + summary["read"]
        return {
            **summary,
            "company_id": company_id,
            **engagement.summarize(sent, summary["read"]),
        }

    async def get_log(self, log_id: uuid.UUID) -> CommunicationLog:
        log = await self.log_repo.get(log_id)
        if not log:
            raise_not_found("Communication log", str(log_id))
        return log

    async def mark_read(self, log_id: uuid.UUID) -> CommunicationLog:
        log = await self.get_log(log_id)
        if log.status == MessageStatus.READ:
            return log
        if log.status in (MessageStatus.DRAFT, MessageStatus.SCHEDULED):
            raise_validation_error(f"A {log.status} message cannot be read", "status")

        updated = await self.log_repo.set_status(log_id, MessageStatus.READ)
        if not updated:
            raise_not_found("Communication log", str(log_id))
        return updated

    async def save_message_analysis(
        self,
        log_id: uuid.UUID,
        data: MessageAnalysisRequest
    ) -> MessageAnalysis:
        """Store an analysis result and copy score and label onto the log."""
        log = await self.get_log(log_id)
        label = data.sentiment_label or engagement.sentiment_label(data.sentiment_score)

        analysis = await self.analysis_repo.create({
            "log_id": str(log.id),
            "company_id": str(log.company_id) if log.company_id else None,
            "sentiment_score": data.sentiment_score,
            "sentiment_label": label,
            "confidence": data.confidence,
            "summary": data.summary,
        })
        await self.log_repo.set_sentiment(log.id, data.sentiment_score, label)
        return analysis
