from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Optional

import pytest

from src.hr_messaging.hr_messaging.chat.service import MessageService
from src.hr_messaging.hr_messaging.chat.signals import SignalService
from src.hr_messaging.hr_messaging.chat.teardown import TeardownService
from src.hr_messaging.hr_messaging.conversations.directory import ConversationDirectory, department_group_id
from src.hr_messaging.hr_messaging.conversations.model import ChatMessage, Conversation
from src.hr_messaging.hr_messaging.core.enums import Role
from src.hr_messaging.hr_messaging.core.exceptions import ConflictError, TransientError
from src.hr_messaging.hr_messaging.departments.model import DepartmentMessage
from src.hr_messaging.hr_messaging.notifications.bus import NotificationBus
from src.hr_messaging.hr_messaging.notifications.model import NotificationRecord
from src.hr_messaging.hr_messaging.notifications.service import NotificationService
from src.hr_messaging.hr_messaging.realtime.manager import SessionManager
from src.hr_messaging.hr_messaging.users.model import DirectoryUser
from src.hr_messaging.hr_messaging.users.service import AuthService
from src.hr_messaging.hr_messaging.users.tokens import JWTTokenVerifier

JWT_SECRET = "test-jwt-secret"

ADMIN, HR, SAM, SUE, IAN, OWNER, GONE = 1, 2, 3, 4, 5, 6, 7


class FakeGateway:
    def __init__(self):
        self.emitted: list[tuple[str, dict, str]] = []
        self.rooms: dict[str, set[str]] = {}
        self.failing_events: set[str] = set()

    def emit(self, event, payload, *, room):
        if event in self.failing_events:
            raise RuntimeError("socket write failed")
        self.emitted.append((event, payload, room))

    def enter_room(self, sid, room):
        self.rooms.setdefault(sid, set()).add(room)

    def events(self, name, room=None):
        return [p for (e, p, r) in self.emitted if e == name and (room is None or r == room)]


class FakeUserDirectory:
    def __init__(self, users):
        self._users = {u.user_id: u for u in users}
        self.fail = False

    def resolve_user(self, user_id):
        if self.fail:
            raise TransientError("Database unavailable")
        return self._users.get(int(user_id))

    def list_department_members(self, department):
        if self.fail:
            raise TransientError("Database unavailable")
        group_id = department_group_id(department)
        return [
            u.user_id
            for u in self._users.values()
            if u.department and department_group_id(u.department) == group_id and u.is_active
        ]


class InMemoryConversationRepo:
    def __init__(self):
        self._conversations: dict[int, Conversation] = {}
        self._messages: dict[int, ChatMessage] = {}
        self._next_conversation = 1
        self._next_message = 1
        # Simulates the other participant's insert landing first.
        self.lose_next_create = False
        self.create_calls = 0

    def _insert(self, *, participant_a, participant_b, participant_key, created_at):
        conversation = Conversation(
            conversation_id=self._next_conversation,
            participant_a=participant_a,
            participant_b=participant_b,
            participant_key=participant_key,
            last_message_at=created_at,
            created_at=created_at,
        )
        self._conversations[conversation.conversation_id] = conversation
        self._next_conversation += 1
        return conversation

    def get_by_id(self, conversation_id):
        return self._conversations.get(int(conversation_id))

    def get_by_key(self, participant_key):
        for c in self._conversations.values():
            if c.participant_key == participant_key:
                return c
        return None

    def create(self, *, participant_a, participant_b, participant_key, created_at):
        self.create_calls += 1
        if self.lose_next_create:
            self.lose_next_create = False
            self._insert(
                participant_a=participant_a,
                participant_b=participant_b,
                participant_key=participant_key,
                created_at=created_at,
            )
            raise ConflictError("Duplicate entry")
        if self.get_by_key(participant_key):
            raise ConflictError("Duplicate entry")
        return self._insert(
            participant_a=participant_a,
            participant_b=participant_b,
            participant_key=participant_key,
            created_at=created_at,
        )

    def delete_with_messages(self, conversation_id):
        doomed = [mid for mid, m in self._messages.items() if m.conversation_id == int(conversation_id)]
        for mid in doomed:
            del self._messages[mid]
        self._conversations.pop(int(conversation_id), None)
        return len(doomed)

    def add_message(self, *, conversation_id, sender_id, recipient_id, content, kind, created_at):
        message = ChatMessage(
            message_id=self._next_message,
            conversation_id=int(conversation_id),
            sender_id=sender_id,
            recipient_id=recipient_id,
            content=content,
            kind=kind,
            created_at=created_at,
        )
        self._messages[message.message_id] = message
        self._next_message += 1
        conversation = self._conversations[int(conversation_id)]
        self._conversations[conversation.conversation_id] = replace(conversation, last_message_at=created_at)
        return message

    def mark_read(self, *, conversation_id, reader_id, read_at):
        updated = 0
        for mid, m in list(self._messages.items()):
            if m.conversation_id == int(conversation_id) and m.recipient_id == int(reader_id) and m.read_at is None:
                self._messages[mid] = replace(m, read_at=read_at)
                updated += 1
        return updated

    def count_unread(self, reader_id):
        return sum(1 for m in self._messages.values() if m.recipient_id == int(reader_id) and m.read_at is None)

    def list_messages(self, conversation_id, *, limit=200):
        rows = [m for m in self._messages.values() if m.conversation_id == int(conversation_id)]
        rows.sort(key=lambda m: m.message_id)
        return rows[-limit:]


class InMemoryDepartmentMessageRepo:
    def __init__(self):
        self.rows: list[DepartmentMessage] = []

    def append(self, *, group_id, department, sender_id, sender_name, content, kind, created_at):
        message = DepartmentMessage(
            message_id=len(self.rows) + 1,
            group_id=group_id,
            department=department,
            sender_id=sender_id,
            sender_name=sender_name,
            content=content,
            kind=kind,
            created_at=created_at,
        )
        self.rows.append(message)
        return message

    def list_by_group(self, group_id, *, limit=200):
        return [m for m in self.rows if m.group_id == group_id][-limit:]


class InMemoryNotificationRepo:
    def __init__(self):
        self.rows: dict[int, NotificationRecord] = {}
        self.failing_users: set[int] = set()

    def create(self, *, user_id, message, kind, created_at):
        if int(user_id) in self.failing_users:
            raise TransientError("Database unavailable")
        record = NotificationRecord(
            notification_id=len(self.rows) + 1,
            user_id=int(user_id),
            message=message,
            kind=kind,
            created_at=created_at,
        )
        self.rows[record.notification_id] = record
        return record

    def get_by_id(self, notification_id) -> Optional[NotificationRecord]:
        return self.rows.get(int(notification_id))

    def mark_read(self, notification_id):
        record = self.rows.get(int(notification_id))
        if not record or record.read:
            return False
        self.rows[record.notification_id] = replace(record, read=True)
        return True

    def for_user(self, user_id):
        return [r for r in self.rows.values() if r.user_id == int(user_id)]


def directory_users():
    return [
        DirectoryUser(user_id=ADMIN, full_name="Ada Admin", role=Role.ADMIN, department=None),
        DirectoryUser(user_id=HR, full_name="Hana Reyes", role=Role.HR, department="HR"),
        DirectoryUser(user_id=SAM, full_name="Sam Porter", role=Role.STAFF, department="Sales"),
        DirectoryUser(user_id=SUE, full_name="Sue Lind", role=Role.STAFF, department="Sales"),
        DirectoryUser(user_id=IAN, full_name="", role=Role.STAFF, department="IT"),
        DirectoryUser(user_id=OWNER, full_name="Olga Owner", role=Role.OWNER, department=None),
        DirectoryUser(user_id=GONE, full_name="Gus Gone", role=Role.STAFF, department="Sales", is_active=False),
    ]


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def users():
    return FakeUserDirectory(directory_users())


@pytest.fixture
def conversations_repo():
    return InMemoryConversationRepo()


@pytest.fixture
def department_repo():
    return InMemoryDepartmentMessageRepo()


@pytest.fixture
def notification_repo():
    return InMemoryNotificationRepo()


@pytest.fixture
def bus():
    bus = NotificationBus()
    yield bus
    bus.close()


@pytest.fixture
def notification_service(notification_repo, bus):
    return NotificationService(notification_repo, bus)


@pytest.fixture
def directory(conversations_repo, users):
    return ConversationDirectory(conversations_repo, users)


@pytest.fixture
def fanout():
    executor = ThreadPoolExecutor(max_workers=4)
    yield executor
    executor.shutdown(wait=True)


@pytest.fixture
def message_service(directory, conversations_repo, department_repo, users, notification_service, gateway, fanout):
    return MessageService(
        directory,
        conversations_repo,
        department_repo,
        users,
        notification_service,
        gateway,
        fanout=fanout,
        fanout_timeout=2.0,
    )


@pytest.fixture
def signal_service(directory, conversations_repo, gateway):
    return SignalService(directory, conversations_repo, gateway)


@pytest.fixture
def teardown_service(directory, conversations_repo, gateway):
    return TeardownService(directory, conversations_repo, gateway)


@pytest.fixture
def auth_service():
    return AuthService(JWTTokenVerifier(JWT_SECRET))


@pytest.fixture
def session_manager(auth_service, users, gateway, bus):
    manager = SessionManager(auth_service, users, gateway, bus)
    yield manager
    manager.close()
