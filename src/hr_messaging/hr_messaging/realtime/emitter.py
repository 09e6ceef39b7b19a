from __future__ import annotations

import logging
from typing import Any, Protocol

from flask_socketio import SocketIO

logger = logging.getLogger(__name__)


class RoomGateway(Protocol):
    """What the realtime services need from the socket server."""

    def emit(self, event: str, payload: Any, *, room: str) -> None:
        raise NotImplementedError

    def enter_room(self, sid: str, room: str) -> None:
        raise NotImplementedError


class SocketIOGateway(RoomGateway):
    """RoomGateway backed by Flask-SocketIO.

    Every connection is also a room named after its sid, so ``room=sid``
    targets a single connection.
    """

    def __init__(self, socketio: SocketIO, *, namespace: str = "/"):
        self._socketio = socketio
        self._namespace = namespace

    def emit(self, event: str, payload: Any, *, room: str) -> None:
        self._socketio.emit(event, payload, to=room, namespace=self._namespace)

    def enter_room(self, sid: str, room: str) -> None:
        self._socketio.server.enter_room(sid, room, namespace=self._namespace)


def safe_emit(gateway: RoomGateway, event: str, payload: Any, *, room: str) -> bool:
    """Emit after the primary write already succeeded; a transport hiccup is only logged."""

    try:
        gateway.emit(event, payload, room=room)
        return True
    except Exception:
        logger.warning("Failed to emit %s to %s", event, room, exc_info=True)
        return False
