from __future__ import annotations

import logging
from typing import Any

from ..common.datetime_utils import now_utc
from ..common.validators import require_id
from ..conversations.directory import ConversationDirectory
from ..conversations.repository import ConversationRepository
from ..core.constants import user_room
from ..core.exceptions import ValidationError
from ..realtime.emitter import RoomGateway, safe_emit
from ..users.model import Identity

logger = logging.getLogger(__name__)


class SignalService:
    """Read receipts and typing indicators."""

    def __init__(self, directory: ConversationDirectory, conversations: ConversationRepository, gateway: RoomGateway):
        self._directory = directory
        self._conversations = conversations
        self._gateway = gateway

    def mark_read(self, identity: Identity, conversation_id: Any) -> int:
        """Stamp read_at on unread messages addressed to the reader.

        Re-running it is a no-op (0 rows). The ack goes to the reader's own
        room only; senders are not told.
        """

        conversation = self._directory.get_for_participant(require_id(conversation_id, "Conversation"), identity.user_id)
        updated = self._conversations.mark_read(
            conversation_id=conversation.conversation_id,
            reader_id=identity.user_id,
            read_at=now_utc(),
        )
        safe_emit(
            self._gateway,
            "read_receipt_ack",
            {"conversation_id": conversation.conversation_id},
            room=user_room(identity.user_id),
        )
        return updated

    def signal_typing(self, identity: Identity, to_id: Any, is_typing: Any, conversation_id: Any = None) -> bool:
        try:
            to_id = require_id(to_id, "Recipient")
        except ValidationError:
            logger.debug("Dropping typing signal from %s with bad recipient %r", identity.user_id, to_id)
            return False

        payload = {"from": identity.user_id, "typing": bool(is_typing), "conversation_id": conversation_id}
        return safe_emit(self._gateway, "typing", payload, room=user_room(to_id))

    def unread_count(self, identity: Identity) -> int:
        return self._conversations.count_unread(identity.user_id)
