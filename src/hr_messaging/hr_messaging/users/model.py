from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Identity:
    """Who is on the other end of a connection, as proven by the credential."""

    user_id: int
    role: Role


@dataclass(frozen=True)
class DirectoryUser:
    """Domain entity: a user as seen by the messaging layer.

    Note: Plain data object; the user directory collaborator owns the rows.
    """

    user_id: int
    full_name: str
    role: Role
    department: Optional[str]
    is_active: bool = True
