"""
Fallback channel selection.

Each company ranks its channels; an employee is reached on the first
channel in that ranking for which they have a usable contact value.
This is a static preference lookup: no delivery attempt, no retry.
"""
from enum import Enum
from typing import Any, Iterable, List, Optional

from staffhub.models.employee import Employee


class Channel(str, Enum):
    WHATSAPP = "WhatsApp"
    TELEGRAM = "Telegram"
    SMS = "SMS"
    EMAIL = "Email"

    @classmethod
    def parse(cls, name: Any) -> Optional["Channel"]:
        """Case-insensitive lookup; None for unknown names."""
        if isinstance(name, Channel):
            return name
        if not isinstance(name, str):
            return None
        wanted = name.strip().lower()
        for channel in cls:
            if channel.value.lower() == wanted:
                return channel
        return None


DEFAULT_ORDER: List[Channel] = [Channel.WHATSAPP, Channel.TELEGRAM, Channel.SMS, Channel.EMAIL]
DEFAULT_CHANNEL = Channel.EMAIL


def parse_order(raw: Any) -> List[Channel]:
    """
    Normalize a stored fallback configuration.

    Accepts a list of channel names or a `{"order": [...]}` mapping.
    Unknown names and repeats are dropped; nothing usable means DEFAULT_ORDER.
    """
    if isinstance(raw, dict):
        raw = raw.get("order")
    if not isinstance(raw, (list, tuple)):
        return list(DEFAULT_ORDER)

    order: List[Channel] = []
    for name in raw:
        channel = Channel.parse(name)
        if channel and channel not in order:
            order.append(channel)
    return order or list(DEFAULT_ORDER)


def to_config(order: Iterable[Channel]) -> dict:
    """Storage form of a fallback order."""
    return {"order": [Channel(c).value for c in order]}


def _present(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def telegram_handle(employee: Employee) -> Optional[str]:
    if not _present(employee.telegram_username):
        return None
    return employee.telegram_username.strip().lstrip("@") or None


def contact_address(employee: Employee, channel: Channel) -> Optional[str]:
    """Where to reach the employee on `channel`, or None if not reachable there."""
    if channel == Channel.WHATSAPP:
        if employee.whatsapp_enabled is False:
            return None
        for value in (employee.whatsapp_phone, employee.phone):
            if _present(value):
                return value.strip()
        return None

    if channel == Channel.SMS:
        if employee.sms_enabled is False:
            return None
        for value in (employee.sms_phone, employee.phone):
            if _present(value):
                return value.strip()
        return None

    if channel == Channel.TELEGRAM:
        if employee.telegram_enabled is False:
            return None
        handle = telegram_handle(employee)
        return f"@{handle}" if handle else None

    if channel == Channel.EMAIL:
        if not _present(employee.email) or employee.email_enabled is False:
            return None
        if employee.mailing_list or employee.email_enabled:
            return employee.email.strip()
        return None

    return None


def has_usable_contact(employee: Employee, channel: Channel) -> bool:
    return contact_address(employee, channel) is not None


def select_channel(
    employee: Employee,
    order: Optional[Iterable[Any]] = None,
    default: Channel = DEFAULT_CHANNEL,
) -> Channel:
    """
    First channel in `order` the employee can be reached on.

    Falls through to DEFAULT_ORDER, then to `default` when the employee
    matches nothing.
    """
    ranked = parse_order(list(order)) if order is not None else list(DEFAULT_ORDER)
    for channel in ranked + [c for c in DEFAULT_ORDER if c not in ranked]:
        if has_usable_contact(employee, channel):
            return channel
    return default


def usable_channels(employee: Employee, order: Optional[Iterable[Any]] = None) -> List[Channel]:
    """All channels the employee can be reached on, in priority order."""
    ranked = parse_order(list(order)) if order is not None else list(DEFAULT_ORDER)
    return [c for c in ranked if has_usable_contact(employee, c)]
