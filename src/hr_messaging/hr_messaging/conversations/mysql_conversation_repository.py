from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import MessageKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ChatMessage, Conversation
from .repository import ConversationRepository

_CONVERSATION_COLUMNS = "conversation_id, participant_a, participant_b, participant_key, last_message_at, created_at"
_MESSAGE_COLUMNS = "message_id, conversation_id, sender_id, recipient_id, content, kind, read_at, created_at"


def _to_conversation(row: dict) -> Conversation:
    return Conversation(
        conversation_id=int(row["conversation_id"]),
        participant_a=int(row["participant_a"]),
        participant_b=int(row["participant_b"]),
        participant_key=row["participant_key"],
        last_message_at=row["last_message_at"],
        created_at=row["created_at"],
    )


def _to_message(row: dict) -> ChatMessage:
    return ChatMessage(
        message_id=int(row["message_id"]),
        conversation_id=int(row["conversation_id"]),
        sender_id=int(row["sender_id"]),
        recipient_id=int(row["recipient_id"]),
        content=row["content"],
        kind=MessageKind(row["kind"]),
        created_at=row["created_at"],
        read_at=row.get("read_at"),
    )


class MySQLConversationRepository(ConversationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, conversation_id: int) -> Optional[Conversation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_CONVERSATION_COLUMNS} FROM chat_conversations WHERE conversation_id=%s",
                (int(conversation_id),),
            )
            row = fetchone(cur)
            return _to_conversation(row) if row else None

    def get_by_key(self, participant_key: str) -> Optional[Conversation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_CONVERSATION_COLUMNS} FROM chat_conversations WHERE participant_key=%s",
                (participant_key,),
            )
            row = fetchone(cur)
            return _to_conversation(row) if row else None

    def create(
        self,
        *,
        participant_a: int,
        participant_b: int,
        participant_key: str,
        created_at: datetime,
    ) -> Conversation:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO chat_conversations(participant_a, participant_b, participant_key, last_message_at, created_at)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(participant_a), int(participant_b), participant_key, created_at, created_at),
            )
            return Conversation(
                conversation_id=int(cur.lastrowid),
                participant_a=int(participant_a),
                participant_b=int(participant_b),
                participant_key=participant_key,
                last_message_at=created_at,
                created_at=created_at,
            )

    def delete_with_messages(self, conversation_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM chat_messages WHERE conversation_id=%s", (int(conversation_id),))
            removed = int(cur.rowcount)
            cur.execute("DELETE FROM chat_conversations WHERE conversation_id=%s", (int(conversation_id),))
            return removed

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO chat_messages(conversation_id, sender_id, recipient_id, content, kind, read_at, created_at)
                VALUES(%s,%s,%s,%s,%s,NULL,%s)
                """,
                (int(conversation_id), int(sender_id), int(recipient_id), content, kind.value, created_at),
            )
            message_id = int(cur.lastrowid)
            cur.execute(
                "UPDATE chat_conversations SET last_message_at=%s WHERE conversation_id=%s",
                (created_at, int(conversation_id)),
            )
            return ChatMessage(
                message_id=message_id,
                conversation_id=int(conversation_id),
                sender_id=int(sender_id),
                recipient_id=int(recipient_id),
                content=content,
                kind=kind,
                created_at=created_at,
            )

    def mark_read(self, *, conversation_id: int, reader_id: int, read_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE chat_messages
                SET read_at=%s
                WHERE conversation_id=%s AND recipient_id=%s AND read_at IS NULL
                """,
                (read_at, int(conversation_id), int(reader_id)),
            )
            return int(cur.rowcount)

    def count_unread(self, reader_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS unread FROM chat_messages WHERE recipient_id=%s AND read_at IS NULL",
                (int(reader_id),),
            )
            row = fetchone(cur)
            return int(row["unread"]) if row else 0

    def list_messages(self, conversation_id: int, *, limit: int = 200) -> Sequence[ChatMessage]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_MESSAGE_COLUMNS} FROM (
                    SELECT {_MESSAGE_COLUMNS} FROM chat_messages
                    WHERE conversation_id=%s
                    ORDER BY message_id DESC
                    LIMIT %s
                ) recent
                ORDER BY message_id ASC
                """,
                (int(conversation_id), int(limit)),
            )
            return [_to_message(r) for r in fetchall(cur)]

