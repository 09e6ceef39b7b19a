from __future__ import annotations

import logging
from functools import wraps

from flask import request
from flask_socketio import SocketIO

from ..container import Container
from ..core.exceptions import AuthenticationError, DomainError
from ..users.service import extract_token
from .emitter import safe_emit
from .session import ConnectionSession

logger = logging.getLogger(__name__)


def register(socketio: SocketIO, container: Container) -> None:
    manager = container.session_manager

    def socket_action(failure_message: str):
        """Resolve the caller's session and turn failures into ``error_message``.

        The connection always stays open; only the handshake can refuse it.
        """

        def decorator(handler):
            @wraps(handler)
            def wrapper(data=None):
                sid = request.sid
                try:
                    session = manager.require(sid)
                    return handler(session, data if isinstance(data, dict) else {})
                except DomainError as e:
                    logger.info("%s rejected for sid=%s: %s", handler.__name__, sid, e)
                    safe_emit(container.gateway, "error_message", {"message": str(e)}, room=sid)
                except Exception:
                    logger.exception("%s failed for sid=%s", handler.__name__, sid)
                    safe_emit(container.gateway, "error_message", {"message": failure_message}, room=sid)
                return {"ok": False}

            return wrapper

        return decorator

    @socketio.on("connect")
    def on_connect(auth=None):
        token = extract_token(auth, request.headers)
        try:
            session = manager.connect(request.sid, token)
        except AuthenticationError:
            logger.info("Refused realtime connection (sid=%s)", request.sid)
            return False
        except Exception:
            logger.exception("Handshake failed (sid=%s)", request.sid)
            return False
        logger.debug("User %s connected (sid=%s, rooms=%s)", session.user_id, session.sid, sorted(session.rooms))
        return True

    @socketio.on("disconnect")
    def on_disconnect(*_reason):
        manager.disconnect(request.sid)

    @socketio.on("send_message")
    @socket_action("Failed to send message")
    def send_message(session: ConnectionSession, data: dict):
        message = container.message_service.send_direct(
            session.identity,
            data.get("to"),
            data.get("content"),
            data.get("type"),
            conversation_id=data.get("conversation_id"),
        )
        return {"ok": True, "message_id": message.message_id, "conversation_id": message.conversation_id}

    @socketio.on("send_department_message")
    @socket_action("Failed to send department message")
    def send_department_message(session: ConnectionSession, data: dict):
        result = container.message_service.send_department_broadcast(
            session.identity,
            data.get("message"),
            data.get("type"),
            target_department=data.get("target_department"),
        )
        return {
            "ok": True,
            "message_id": result.message.message_id,
            "group_id": result.message.group_id,
            "notified_members": result.notified,
        }

    @socketio.on("join_department")
    @socket_action("Failed to join department")
    def join_department(session: ConnectionSession, data: dict):
        session = manager.join_department(session.sid, department=data.get("department"), group_id=data.get("group_id"))
        return {"ok": True, "rooms": sorted(session.rooms)}

    @socketio.on("typing")
    def typing(data=None):
        # Advisory only: never answered with error_message.
        session = manager.get(request.sid)
        if session is None or not isinstance(data, dict):
            return
        try:
            container.signal_service.signal_typing(
                session.identity,
                data.get("to"),
                data.get("typing"),
                conversation_id=data.get("conversation_id"),
            )
        except Exception:
            logger.debug("Typing signal dropped for sid=%s", request.sid, exc_info=True)

    @socketio.on("read_receipt")
    @socket_action("Failed to update read receipts")
    def read_receipt(session: ConnectionSession, data: dict):
        updated = container.signal_service.mark_read(session.identity, data.get("conversation_id"))
        return {"ok": True, "updated": updated}

    @socketio.on("end_conversation")
    @socket_action("Failed to end conversation")
    def end_conversation(session: ConnectionSession, data: dict):
        removed = container.teardown_service.end_conversation(session.identity, data.get("conversation_id"))
        return {"ok": True, "deleted_messages": removed}

    @socketio.on("open_conversation")
    @socket_action("Failed to open conversation")
    def open_conversation(session: ConnectionSession, data: dict):
        conversation = container.directory.open_conversation(session.identity, data.get("participant_id"))
        return {"ok": True, "conversation_id": conversation.conversation_id}

    @socketio.on("load_history")
    @socket_action("Failed to load messages")
    def load_history(session: ConnectionSession, data: dict):
        messages = container.directory.history(session.identity, data.get("conversation_id"))
        return {"ok": True, "messages": [m.to_payload() for m in messages]}

    @socketio.on("load_department_history")
    @socket_action("Failed to load department messages")
    def load_department_history(session: ConnectionSession, data: dict):
        messages = container.message_service.department_history(session.identity, data.get("department"))
        return {"ok": True, "messages": [m.to_payload() for m in messages]}

    @socketio.on("notification_read")
    @socket_action("Failed to update notification")
    def notification_read(session: ConnectionSession, data: dict):
        changed = container.notification_service.mark_read(session.identity, data.get("notification_id"))
        return {"ok": True, "changed": changed}

    @socketio.on("load_unread_count")
    @socket_action("Failed to count unread messages")
    def load_unread_count(session: ConnectionSession, data: dict):
        return {"ok": True, "count": container.signal_service.unread_count(session.identity)}
