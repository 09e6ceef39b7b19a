from __future__ import annotations

import logging
from typing import Any

from ..common.validators import require_id
from ..conversations.directory import ConversationDirectory
from ..conversations.repository import ConversationRepository
from ..core.constants import user_room
from ..core.exceptions import AuthorizationError
from ..core.policies import can_teardown_conversation
from ..realtime.emitter import RoomGateway, safe_emit
from ..users.model import Identity

logger = logging.getLogger(__name__)


class TeardownService:
    """Use case: an admin ends a conversation for good (no soft delete)."""

    def __init__(self, directory: ConversationDirectory, conversations: ConversationRepository, gateway: RoomGateway):
        self._directory = directory
        self._conversations = conversations
        self._gateway = gateway

    def end_conversation(self, identity: Identity, conversation_id: Any) -> int:
        if not can_teardown_conversation(identity.role):
            raise AuthorizationError("Only admins can end a conversation")

        conversation = self._directory.get(require_id(conversation_id, "Conversation"))
        removed = self._conversations.delete_with_messages(conversation.conversation_id)
        logger.info(
            "Admin %s ended conversation %s (%d messages deleted)",
            identity.user_id,
            conversation.conversation_id,
            removed,
        )

        payload = {"conversation_id": conversation.conversation_id}
        for participant in conversation.participants:
            safe_emit(self._gateway, "conversation_ended", payload, room=user_room(participant))
        return removed
