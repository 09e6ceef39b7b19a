from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from ..common.datetime_utils import to_iso
from ..core.enums import MessageKind


@dataclass(frozen=True)
class Conversation:
    """A 1:1 conversation. ``participant_a`` sorts before ``participant_b`` as strings."""

    conversation_id: int
    participant_a: int
    participant_b: int
    participant_key: str
    last_message_at: datetime
    created_at: datetime

    @property
    def participants(self) -> Tuple[int, int]:
        return self.participant_a, self.participant_b

    def includes(self, user_id: int) -> bool:
        return int(user_id) in self.participants

    def other_participant(self, user_id: int) -> int:
        if int(user_id) == self.participant_a:
            return self.participant_b
        return self.participant_a


@dataclass(frozen=True)
class ChatMessage:
    message_id: int
    conversation_id: int
    sender_id: int
    recipient_id: int
    content: str
    kind: MessageKind
    created_at: datetime
    read_at: Optional[datetime] = None

    def to_payload(self) -> dict:
        return {
            "message_id": self.message_id,
            "conversation_id": self.conversation_id,
            "sender_id": self.sender_id,
            "recipient_id": self.recipient_id,
            "content": self.content,
            "type": self.kind.value,
            "created_at": to_iso(self.created_at),
            "read_at": to_iso(self.read_at),
        }
