"""Builders for the `Ticket` and `Article` request sections.

Reference:
- TicketCreate: https://doc.znuny.org/doc/api/znuny/6.0/Perl/Kernel/GenericInterface/Operation/Ticket/TicketCreate.pm.html
- TicketUpdate: https://doc.znuny.org/doc/api/znuny/6.0/Perl/Kernel/GenericInterface/Operation/Ticket/TicketUpdate.pm.html
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

import structlog

from znuny_rest_client.domain.errors import ValidationError, require_text

log = structlog.get_logger(__name__)

DEFAULT_CONTENT_TYPE = "text/plain; charset=ISO-8859-1"
DEFAULT_COMMUNICATION_CHANNEL = "Internal"

TICKET_DEFAULTS: Mapping[str, Any] = {
    "LockState": "unlock",
    "PriorityID": 2,
    "State": "new",
}


class CommunicationChannel(Enum):
    NOTE_INTERNAL = "note-internal"
    INTERNAL = "Internal"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str) -> CommunicationChannel:
        if value == cls.NOTE_INTERNAL.value:
            return cls.NOTE_INTERNAL
        if value == cls.INTERNAL.value:
            return cls.INTERNAL
        # Znuny accepts more channels (Email, Phone, Chat); they need no extra fields.
        return cls.OTHER


def build_article(
    created_by: str,
    subject: str,
    body: str,
    from_: str | None = None,
    content_type: str = DEFAULT_CONTENT_TYPE,
    communication_channel: str = DEFAULT_COMMUNICATION_CHANNEL,
    extra: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    require_text("subject", subject)
    require_text("body", body)

    article: dict[str, Any] = {
        "Subject": subject,
        "Body": body,
        "CommunicationChannel": communication_channel,
        "ContentType": content_type,
        "HistoryType": "WebRequestCustomer",
        "HistoryComment": created_by,
        "SenderType": "system",
    }
    article.update(extra or {})

    if from_:
        article["From"] = from_

    channel = CommunicationChannel.parse(communication_channel)
    if channel is CommunicationChannel.NOTE_INTERNAL:
        article["NoAgentNotify"] = 1
        article["CommunicationChannel"] = CommunicationChannel.INTERNAL.value
    elif channel is CommunicationChannel.INTERNAL:
        article["Loop"] = 0
        article["AutoResponseType"] = "auto reply"
        article["OrigHeader"] = {
            "From": from_,
            "To": "Postmaster",
            "Subject": subject,
            "Body": body,
        }
    else:
        log.debug("znuny.article.channel_passthrough", channel=communication_channel)

    return article


def build_ticket(
    title: str,
    customer: str,
    extra: Mapping[str, Any] | None = None,
    *,
    queue_id: int | None = None,
    queue_name: str | None = None,
) -> dict[str, Any]:
    """
    Build the `Ticket` section for TicketCreate.

    Exactly one of `queue_id` / `queue_name` must be given. `CustomerUser` and `Title`
    always reflect the arguments, even when `extra` carries the same keys.
    """
    require_text("title", title)
    _check_queue(queue_id, queue_name)

    ticket: dict[str, Any] = {**TICKET_DEFAULTS, **(extra or {})}
    ticket.pop("QueueID", None)
    ticket.pop("Queue", None)

    ticket["CustomerUser"] = customer
    ticket["Title"] = title
    if queue_id is not None:
        ticket["QueueID"] = queue_id
    else:
        ticket["Queue"] = queue_name
    return ticket


def _check_queue(queue_id: int | None, queue_name: str | None) -> None:
    if queue_id is not None and queue_name is not None:
        raise ValidationError("queue", "Give either a queue id or a queue name, not both")
    if queue_id is not None:
        # bool is an int subclass; True is not a queue.
        if isinstance(queue_id, bool) or not isinstance(queue_id, int):
            raise ValidationError("queue", f"Queue id must be an integer, got {queue_id!r}")
        return
    if queue_name is None or not queue_name.strip():
        raise ValidationError("queue", "Need a queue. Queue id and queue name are empty")
