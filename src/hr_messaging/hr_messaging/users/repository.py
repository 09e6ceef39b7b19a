from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import DirectoryUser, Identity


class UserDirectory(Protocol):
    """Read-only view of the HR user store.

    Note (DIP): the realtime services depend on this interface, never on MySQL.
    """

    def resolve_user(self, user_id: int) -> Optional[DirectoryUser]:
        raise NotImplementedError

    def list_department_members(self, department: str) -> Sequence[int]:
        """Return ids of active users in ``department``.

        Names are compared by ``department_group_id``, so spacing and casing do not matter.
        """

        raise NotImplementedError


class TokenVerifier(Protocol):
    def verify(self, token: str) -> Identity:
        raise NotImplementedError
