from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from .chat.service import MessageService
from .chat.signals import SignalService
from .chat.teardown import TeardownService
from .conversations.directory import ConversationDirectory
from .conversations.mysql_conversation_repository import MySQLConversationRepository
from .core.constants import DEFAULT_NOTIFY_FANOUT_TIMEOUT_SECONDS, DEFAULT_NOTIFY_FANOUT_WORKERS
from .database.connection import DatabaseConnection
from .departments.mysql_department_message_repository import MySQLDepartmentMessageRepository
from .notifications.bus import NotificationBus
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.service import NotificationService
from .realtime.emitter import RoomGateway
from .realtime.manager import SessionManager
from .users.mysql_user_repository import MySQLUserDirectory
from .users.service import AuthService
from .users.tokens import JWTTokenVerifier


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users: MySQLUserDirectory
    conversations_repo: MySQLConversationRepository
    department_messages_repo: MySQLDepartmentMessageRepository
    notifications_repo: MySQLNotificationRepository

    bus: NotificationBus
    gateway: RoomGateway
    fanout_executor: ThreadPoolExecutor

    auth_service: AuthService
    directory: ConversationDirectory
    notification_service: NotificationService
    message_service: MessageService
    signal_service: SignalService
    teardown_service: TeardownService
    session_manager: SessionManager

    def close(self) -> None:
        self.session_manager.close()
        self.bus.close()
        self.fanout_executor.shutdown(wait=False)


def build_container(
    *,
    db_config: dict,
    gateway: RoomGateway,
    jwt_secret: str,
    jwt_algorithm: str = "HS256",
    fanout_workers: int = DEFAULT_NOTIFY_FANOUT_WORKERS,
    fanout_timeout: float = DEFAULT_NOTIFY_FANOUT_TIMEOUT_SECONDS,
) -> Container:
    conn = DatabaseConnection.from_dict(db_config)

    users = MySQLUserDirectory(conn)
    conversations_repo = MySQLConversationRepository(conn)
    department_messages_repo = MySQLDepartmentMessageRepository(conn)
    notifications_repo = MySQLNotificationRepository(conn)

    bus = NotificationBus()
    fanout_executor = ThreadPoolExecutor(max_workers=max(1, int(fanout_workers)), thread_name_prefix="notify-fanout")

    auth_service = AuthService(JWTTokenVerifier(jwt_secret, algorithm=jwt_algorithm))
    directory = ConversationDirectory(conversations_repo, users)
    notification_service = NotificationService(notifications_repo, bus)
    message_service = MessageService(
        directory,
        conversations_repo,
        department_messages_repo,
        users,
        notification_service,
        gateway,
        fanout=fanout_executor,
        fanout_timeout=fanout_timeout,
    )
    signal_service = SignalService(directory, conversations_repo, gateway)
    teardown_service = TeardownService(directory, conversations_repo, gateway)
    session_manager = SessionManager(auth_service, users, gateway, bus)

    return Container(
        conn=conn,
        users=users,
        conversations_repo=conversations_repo,
        department_messages_repo=department_messages_repo,
        notifications_repo=notifications_repo,
        bus=bus,
        gateway=gateway,
        fanout_executor=fanout_executor,
        auth_service=auth_service,
        directory=directory,
        notification_service=notification_service,
        message_service=message_service,
        signal_service=signal_service,
        teardown_service=teardown_service,
        session_manager=session_manager,
    )
