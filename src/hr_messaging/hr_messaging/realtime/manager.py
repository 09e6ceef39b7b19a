from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Dict, List, Optional

from ..conversations.directory import department_group_id, is_department_group_id
from ..core.constants import department_room, user_room
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..core.policies import auto_joins_department, can_join_department
from ..notifications.bus import NotificationBus
from ..notifications.model import NotificationEvent
from ..users.repository import UserDirectory
from ..users.service import AuthService
from .emitter import RoomGateway, safe_emit
from .session import ConnectionSession

logger = logging.getLogger(__name__)


class SessionManager:
    """Owns every live connection and the rooms it belongs to.

    Rooms exist only on live connections: nothing about membership is
    persisted, and a disconnect simply drops the session.
    """

    def __init__(self, auth: AuthService, users: UserDirectory, gateway: RoomGateway, bus: NotificationBus):
        self._auth = auth
        self._users = users
        self._gateway = gateway
        self._sessions: Dict[str, ConnectionSession] = {}
        self._lock = threading.Lock()
        self._unsubscribe = bus.subscribe(self._forward_notification)

    # Lifecycle

    def connect(self, sid: str, credential: Optional[str]) -> ConnectionSession:
        """Authenticate and join the automatic rooms.

        Raises AuthenticationError before any state is created.
        """

        identity = self._auth.authenticate(credential)
        with self._lock:
            self._sessions[sid] = ConnectionSession(sid=sid, identity=identity)

        try:
            session = self._add_room(sid, user_room(identity.user_id))
            safe_emit(self._gateway, "connected", {"ok": True, "user_id": identity.user_id}, room=session.personal_room)
            return self._auto_join_department(session)
        except Exception:
            # the handshake is refused; leave no session behind
            with self._lock:
                self._sessions.pop(sid, None)
            raise

    def _auto_join_department(self, session: ConnectionSession) -> ConnectionSession:
        if not auto_joins_department(session.role):
            return session

        try:
            user = self._users.resolve_user(session.user_id)
        except Exception:
            logger.warning("Department lookup failed for user %s; personal room only", session.user_id, exc_info=True)
            return session

        department = (user.department or "").strip() if user else ""
        if not department:
            return session

        group_id = department_group_id(department)
        session = self._add_room(session.sid, department_room(group_id), group_id=group_id)
        safe_emit(
            self._gateway,
            "department_joined",
            {"group_id": group_id, "department": department},
            room=session.sid,
        )
        return session

    def join_department(
        self,
        sid: str,
        *,
        department: Optional[str] = None,
        group_id: Optional[str] = None,
    ) -> ConnectionSession:
        session = self.require(sid)
        if not can_join_department(session.role):
            raise AuthorizationError("Staff can only join their own department")

        if department and str(department).strip():
            department = str(department).strip()
            resolved = department_group_id(department)
        elif group_id:
            resolved = str(group_id).strip()
            if not is_department_group_id(resolved):
                raise ValidationError("Department group is invalid")
        else:
            raise ValidationError("Department is required")

        session = self._add_room(sid, department_room(resolved))
        payload = {"group_id": resolved}
        if department:
            payload["department"] = department
        safe_emit(self._gateway, "department_joined", payload, room=sid)
        return session

    def disconnect(self, sid: str) -> Optional[ConnectionSession]:
        with self._lock:
            session = self._sessions.pop(sid, None)
        if session is None:
            return None
        logger.debug("User %s disconnected (sid=%s)", session.user_id, sid)
        return session.close()

    def close(self) -> None:
        self._unsubscribe()
        with self._lock:
            self._sessions.clear()

    # Queries

    def require(self, sid: str) -> ConnectionSession:
        with self._lock:
            session = self._sessions.get(sid)
        if session is None:
            raise AuthenticationError("Unknown connection")
        return session

    def get(self, sid: str) -> Optional[ConnectionSession]:
        with self._lock:
            return self._sessions.get(sid)

    def sessions(self) -> List[ConnectionSession]:
        with self._lock:
            return list(self._sessions.values())

    @property
    def active_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def has_room(self, room: str) -> bool:
        return any(room in s.rooms for s in self.sessions())

    # Internals

    def _add_room(self, sid: str, room: str, *, group_id: Optional[str] = None) -> ConnectionSession:
        self._gateway.enter_room(sid, room)
        with self._lock:
            session = self._sessions.get(sid)
            if session is None:
                raise AuthenticationError("Connection closed")
            session = session.join(room)
            if group_id is not None:
                session = replace(session, department_group_id=group_id)
            self._sessions[sid] = session
        return session

    def _forward_notification(self, event: NotificationEvent) -> None:
        room = user_room(event.user_id)
        if not self.has_room(room):
            return
        self._gateway.emit("notify", event.to_payload(), room=room)
