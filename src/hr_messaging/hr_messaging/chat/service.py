from __future__ import annotations

import logging
from concurrent.futures import Executor, wait
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..common.keyed_lock import StripedLock
from ..common.validators import parse_message_kind, require_content, require_id
from ..conversations.directory import ConversationDirectory, department_group_id
from ..conversations.model import ChatMessage, Conversation
from ..conversations.repository import ConversationRepository
from ..core.constants import (
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_NOTIFY_FANOUT_TIMEOUT_SECONDS,
    DEFAULT_SENDER_NAME,
    NEW_CHAT_MESSAGE_TEXT,
    NEW_DEPARTMENT_MESSAGE_TEXT,
    department_room,
    user_room,
)
from ..core.enums import NotificationKind
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..core.policies import can_message, can_override_target_department
from ..departments.model import DepartmentMessage
from ..departments.repository import DepartmentMessageRepository
from ..notifications.service import NotificationService
from ..realtime.emitter import RoomGateway, safe_emit
from ..users.model import Identity
from ..users.repository import UserDirectory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BroadcastResult:
    message: DepartmentMessage
    recipients: int
    notified: int


class MessageService:
    """Use case: deliver direct and department chat messages.

    Both paths persist first and emit second, holding a per-room lock across
    the pair so every member sees a room's messages in storage order.
    Notifications are side effects: their failure never undoes a delivery.
    """

    def __init__(
        self,
        directory: ConversationDirectory,
        conversations: ConversationRepository,
        department_messages: DepartmentMessageRepository,
        users: UserDirectory,
        notifications: NotificationService,
        gateway: RoomGateway,
        *,
        fanout: Executor,
        fanout_timeout: float = DEFAULT_NOTIFY_FANOUT_TIMEOUT_SECONDS,
        room_locks: Optional[StripedLock] = None,
    ):
        self._directory = directory
        self._conversations = conversations
        self._department_messages = department_messages
        self._users = users
        self._notifications = notifications
        self._gateway = gateway
        self._fanout = fanout
        self._fanout_timeout = float(fanout_timeout)
        self._room_locks = room_locks or StripedLock()

    # Direct messages

    def _conversation_for(self, identity: Identity, recipient_id: int, conversation_id: Any) -> Conversation:
        if conversation_id in (None, ""):
            return self._directory.find_or_create(identity.user_id, recipient_id)

        conversation = self._directory.get(require_id(conversation_id, "Conversation"))
        if set(conversation.participants) != {identity.user_id, recipient_id}:
            raise ValidationError("Conversation does not belong to these participants")
        return conversation

    def send_direct(
        self,
        identity: Identity,
        recipient_id: Any,
        content: Any,
        kind: Any = None,
        *,
        conversation_id: Any = None,
    ) -> ChatMessage:
        recipient_id = require_id(recipient_id, "Recipient")
        content = require_content(content)
        kind = parse_message_kind(kind)
        if recipient_id == identity.user_id:
            raise ValidationError("Cannot send a message to yourself")

        recipient = self._users.resolve_user(recipient_id)
        if not recipient or not recipient.is_active:
            raise NotFoundError("User not found")
        if not can_message(identity.role, recipient.role):
            raise AuthorizationError("Staff can only message admin and HR users")

        conversation = self._conversation_for(identity, recipient_id, conversation_id)

        with self._room_locks.hold(f"conversation:{conversation.conversation_id}"):
            message = self._conversations.add_message(
                conversation_id=conversation.conversation_id,
                sender_id=identity.user_id,
                recipient_id=recipient_id,
                content=content,
                kind=kind,
                created_at=now_utc(),
            )
            payload = message.to_payload()
            safe_emit(self._gateway, "message", payload, room=user_room(recipient_id))
            safe_emit(self._gateway, "message", payload, room=user_room(identity.user_id))

        self._notify_quietly(recipient_id, NEW_CHAT_MESSAGE_TEXT, NotificationKind.CHAT)
        return message

    # Department broadcast

    def _resolve_department(self, identity: Identity, target_department: Any) -> tuple[str, str]:
        sender = self._users.resolve_user(identity.user_id)
        if not sender:
            raise NotFoundError("User not found")

        department = sender.department
        # The override is silently dropped for roles that cannot redirect a broadcast.
        if target_department and can_override_target_department(identity.role):
            department = str(target_department)

        department = (department or "").strip()
        if not department:
            raise ValidationError("No department specified")
        return department, (sender.full_name or "").strip() or DEFAULT_SENDER_NAME

    def send_department_broadcast(
        self,
        identity: Identity,
        content: Any,
        kind: Any = None,
        target_department: Any = None,
    ) -> BroadcastResult:
        content = require_content(content)
        kind = parse_message_kind(kind)
        department, sender_name = self._resolve_department(identity, target_department)
        group_id = department_group_id(department)
        room = department_room(group_id)

        with self._room_locks.hold(room):
            message = self._department_messages.append(
                group_id=group_id,
                department=department,
                sender_id=identity.user_id,
                sender_name=sender_name,
                content=content,
                kind=kind,
                created_at=now_utc(),
            )
            safe_emit(self._gateway, "department_message", message.to_payload(), room=room)

        recipients, notified = self._fan_out_department(identity.user_id, department)
        return BroadcastResult(message=message, recipients=recipients, notified=notified)

    def department_history(
        self,
        identity: Identity,
        department: Any = None,
        *,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> Sequence[DepartmentMessage]:
        own, _ = self._resolve_department(identity, department)
        return self._department_messages.list_by_group(department_group_id(own), limit=limit)

    # Notifications

    def _notify_quietly(self, user_id: int, text: str, kind: NotificationKind) -> bool:
        try:
            self._notifications.publish(user_id, text, kind)
            return True
        except Exception:
            logger.warning("Notification to user %s failed", user_id, exc_info=True)
            return False

    def _fan_out_department(self, sender_id: int, department: str) -> tuple[int, int]:
        try:
            members = self._users.list_department_members(department)
        except Exception:
            logger.warning("Could not list members of %s; skipping notifications", department, exc_info=True)
            return 0, 0

        recipients = [m for m in members if int(m) != int(sender_id)]
        if not recipients:
            return 0, 0

        text = NEW_DEPARTMENT_MESSAGE_TEXT.format(department=department)
        futures = {
            self._fanout.submit(self._notify_quietly, int(m), text, NotificationKind.DEPARTMENT_CHAT): m
            for m in recipients
        }
        done, not_done = wait(futures, timeout=self._fanout_timeout)
        if not_done:
            logger.warning(
                "%d of %d department notifications for %s still pending after %.1fs",
                len(not_done),
                len(recipients),
                department,
                self._fanout_timeout,
            )
        notified = sum(1 for f in done if f.result())
        return len(recipients), notified
