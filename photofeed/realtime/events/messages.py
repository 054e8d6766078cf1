from __future__ import annotations

from typing import TYPE_CHECKING

from photofeed.messaging.api.serializers import MessageSerializer
from photofeed.realtime.events import NEW_MESSAGE_EVENT
from photofeed.realtime.socketio import emit_event_to_user

if TYPE_CHECKING:  # import for type checking only
    from photofeed.messaging.models import Message


def publish_new_message(message: Message) -> bool:
    """Deliver a freshly stored direct message to its receiver in realtime."""

    payload = dict(MessageSerializer(message).data)
    return emit_event_to_user(message.receiver_id, NEW_MESSAGE_EVENT, payload)
