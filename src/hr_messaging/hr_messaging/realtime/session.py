from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import FrozenSet, Optional

from ..core.constants import user_room
from ..core.enums import Role, SessionState
from ..core.exceptions import ValidationError
from ..users.model import Identity

_TRANSITIONS = {
    SessionState.CONNECTING: {SessionState.AUTHENTICATED, SessionState.DISCONNECTED},
    SessionState.AUTHENTICATED: {SessionState.JOINED, SessionState.DISCONNECTED},
    SessionState.JOINED: {SessionState.JOINED, SessionState.DISCONNECTED},
    SessionState.DISCONNECTED: set(),
}


@dataclass(frozen=True)
class ConnectionSession:
    """Per-connection state, built once at handshake and replaced on every change.

    ``identity`` is fixed for the connection's lifetime; role checks always use
    it rather than anything the client sends later.
    """

    sid: str
    identity: Identity
    state: SessionState = SessionState.AUTHENTICATED
    rooms: FrozenSet[str] = field(default_factory=frozenset)
    department_group_id: Optional[str] = None

    @property
    def user_id(self) -> int:
        return self.identity.user_id

    @property
    def role(self) -> Role:
        return self.identity.role

    @property
    def personal_room(self) -> str:
        return user_room(self.identity.user_id)

    def _move(self, state: SessionState) -> SessionState:
        if state not in _TRANSITIONS[self.state]:
            raise ValidationError(f"Invalid session transition {self.state.value} -> {state.value}")
        return state

    def join(self, room: str) -> "ConnectionSession":
        return replace(self, state=self._move(SessionState.JOINED), rooms=self.rooms | {room})

    def close(self) -> "ConnectionSession":
        return replace(self, state=self._move(SessionState.DISCONNECTED), rooms=frozenset())
