from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import MessageKind
from .model import ChatMessage, Conversation


class ConversationRepository(Protocol):
    # Conversations
    def get_by_id(self, conversation_id: int) -> Optional[Conversation]:
        raise NotImplementedError

    def get_by_key(self, participant_key: str) -> Optional[Conversation]:
        raise NotImplementedError

    def create(
        self,
        *,
        participant_a: int,
        participant_b: int,
        participant_key: str,
        created_at: datetime,
    ) -> Conversation:
        """Insert a conversation; raises ConflictError if the key already exists."""

        raise NotImplementedError

    def delete_with_messages(self, conversation_id: int) -> int:
        """Delete the conversation and its messages in one transaction.

        Returns the number of messages removed.
        """

        raise NotImplementedError

    # Messages
    def add_message(
        self,
        *,
        conversation_id: int,
        sender_id: int,
        recipient_id: int,
        content: str,
        kind: MessageKind,
        created_at: datetime,
    ) -> ChatMessage:
        """Insert the message and bump the conversation's last_message_at together."""

        raise NotImplementedError

    def mark_read(self, *, conversation_id: int, reader_id: int, read_at: datetime) -> int:
        raise NotImplementedError

    def count_unread(self, reader_id: int) -> int:
        """Messages addressed to ``reader_id`` across all conversations with no read_at yet."""

        raise NotImplementedError

    def list_messages(self, conversation_id: int, *, limit: int = 200) -> Sequence[ChatMessage]:
        raise NotImplementedError
