"""Cache-invalidation hints for an event page.

Every mutation on an event-scoped resource is announced to `event:<id>` so
other clients can refetch the matching tab. Delivery is best effort: a
failed emit is logged and never affects the already-committed write.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from noel_famille.realtime.socketio import emit_event_to_event_room

if TYPE_CHECKING:  # import for type checking only
    from noel_famille.chat.models import ChatMessage

logger = logging.getLogger(__name__)

NEW_MESSAGE = "new-message"
POLL_UPDATE = "poll-update"
CONTRIBUTION_UPDATE = "contribution-update"
TASK_UPDATE = "task-update"

CREATED = "created"
UPDATED = "updated"
DELETED = "deleted"


def build_update_payload(
    event_id: int,
    action: str,
    object_id: int | None,
    **extra: Any,
) -> dict[str, Any]:
    return {"eventId": event_id, "action": action, "id": object_id, **extra}


def publish_event_update(event_id: int, event: str, payload: dict[str, Any]) -> None:
    try:
        emit_event_to_event_room(event_id, event, payload)
    except Exception:  # noqa: BLE001 - realtime must never fail a request
        logger.exception("Realtime publish of %s to event %s failed", event, event_id)


def publish_new_message(message: ChatMessage) -> None:
    from noel_famille.chat.api.serializers import ChatMessageSerializer  # noqa: PLC0415

    payload = build_update_payload(
        message.event_id,
        CREATED,
        message.pk,
        message=ChatMessageSerializer(message).data,
    )
    publish_event_update(message.event_id, NEW_MESSAGE, payload)


def publish_poll_update(event_id: int, poll_id: int | None, action: str) -> None:
    payload = build_update_payload(event_id, action, poll_id)
    publish_event_update(event_id, POLL_UPDATE, payload)


def publish_contribution_update(
    event_id: int,
    contribution_id: int | None,
    action: str,
) -> None:
    payload = build_update_payload(event_id, action, contribution_id)
    publish_event_update(event_id, CONTRIBUTION_UPDATE, payload)


def publish_task_update(event_id: int, task_id: int | None, action: str) -> None:
    payload = build_update_payload(event_id, action, task_id)
    publish_event_update(event_id, TASK_UPDATE, payload)
