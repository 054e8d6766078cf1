"""Conversation bookkeeping for direct messages."""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import transaction
from django.utils import timezone

from .models import Conversation
from .models import Message
from .models import participant_key

if TYPE_CHECKING:  # import for type checking only
    from photofeed.users.models import User


def find_conversation(first: User, second: User) -> Conversation | None:
    key = participant_key(first.pk, second.pk)
    return Conversation.objects.filter(participant_key=key).first()


def get_or_create_conversation(first: User, second: User) -> Conversation:
    """Return the pair's conversation, creating it on first contact.

    The unique pair key makes concurrent first messages converge on one row.
    """
    conversation, created = Conversation.objects.get_or_create(
        participant_key=participant_key(first.pk, second.pk)
    )
    if created:
        conversation.participants.add(first, second)
    return conversation


@transaction.atomic
def send_message(sender: User, receiver: User, text: str) -> Message:
    conversation = get_or_create_conversation(sender, receiver)
    message = Message.objects.create(
        conversation=conversation,
        sender=sender,
        receiver=receiver,
        text=text,
    )
    Conversation.objects.filter(pk=conversation.pk).update(updated_at=timezone.now())
    return message


def conversation_messages(first: User, second: User):
    conversation = find_conversation(first, second)
    if conversation is None:
        return Message.objects.none()
    return conversation.messages.all()
