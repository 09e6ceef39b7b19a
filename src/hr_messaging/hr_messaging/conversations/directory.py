from __future__ import annotations

import logging
import re
from typing import Any, Sequence

from ..common.datetime_utils import now_utc
from ..common.validators import require_id
from ..core.constants import CONVERSATION_KEY_SEPARATOR, DEFAULT_HISTORY_LIMIT, DEPARTMENT_GROUP_PREFIX
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, TransientError, ValidationError
from ..core.policies import can_message
from ..users.model import Identity
from ..users.repository import UserDirectory
from .model import ChatMessage, Conversation
from .repository import ConversationRepository

logger = logging.getLogger(__name__)

_WHITESPACE_RUN = re.compile(r"\s+")


def conversation_key(user_a: int, user_b: int) -> str:
    """Order-independent lookup key for a pair of users.

    Ids are compared as strings, so ``(12, 3)`` and ``(3, 12)`` both give ``"12:3"``.
    """

    low, high = sorted((str(user_a), str(user_b)))
    return f"{low}{CONVERSATION_KEY_SEPARATOR}{high}"


def department_group_id(department: str) -> str:
    """Derive the broadcast group id for a department name.

    >>> department_group_id("  Human   Resources ")
    'dept-human-resources'
    """

    slug = _WHITESPACE_RUN.sub("-", (department or "").strip().lower())
    if not slug:
        raise ValidationError("Department is required")
    return f"{DEPARTMENT_GROUP_PREFIX}{slug}"


def is_department_group_id(value: str) -> bool:
    if not value or not value.startswith(DEPARTMENT_GROUP_PREFIX):
        return False
    slug = value[len(DEPARTMENT_GROUP_PREFIX):]
    return bool(slug) and slug == slug.lower() and not _WHITESPACE_RUN.search(slug)


class ConversationDirectory:
    """Use case: resolve the single conversation shared by two users."""

    def __init__(self, conversations: ConversationRepository, users: UserDirectory):
        self._conversations = conversations
        self._users = users

    def find_or_create(self, user_a: int, user_b: int) -> Conversation:
        if int(user_a) == int(user_b):
            raise ValidationError("Cannot open a conversation with yourself")

        key = conversation_key(user_a, user_b)
        existing = self._conversations.get_by_key(key)
        if existing:
            return existing

        low, high = sorted((int(user_a), int(user_b)), key=str)
        try:
            return self._conversations.create(
                participant_a=low,
                participant_b=high,
                participant_key=key,
                created_at=now_utc(),
            )
        except ConflictError:
            # Both participants opened the chat at once; the other insert won.
            logger.info("Conversation %s created concurrently, re-fetching", key)
            winner = self._conversations.get_by_key(key)
            if not winner:
                raise TransientError("Conversation could not be created")
            return winner

    def get(self, conversation_id: Any) -> Conversation:
        conversation = self._conversations.get_by_id(require_id(conversation_id, "Conversation"))
        if not conversation:
            raise NotFoundError("Conversation not found")
        return conversation

    def get_for_participant(self, conversation_id: Any, user_id: int) -> Conversation:
        conversation = self.get(conversation_id)
        if not conversation.includes(user_id):
            raise AuthorizationError("You are not a participant of this conversation")
        return conversation

    def open_conversation(self, identity: Identity, participant_id: Any) -> Conversation:
        """Explicit "open chat" request from a client; applies the messaging policy."""

        other = self._users.resolve_user(require_id(participant_id, "Participant"))
        if not other or not other.is_active:
            raise NotFoundError("User not found")
        if not can_message(identity.role, other.role):
            raise AuthorizationError("Staff can only message admin and HR users")

        return self.find_or_create(identity.user_id, other.user_id)

    def history(self, identity: Identity, conversation_id: Any, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[ChatMessage]:
        conversation = self.get_for_participant(conversation_id, identity.user_id)
        return self._conversations.list_messages(conversation.conversation_id, limit=limit)
