"""Authorization rules for realtime actions.

Every role check used by the messaging layer lives here so each rule is
defined and tested once.
"""

from __future__ import annotations

from .enums import Role

ELEVATED_ROLES = frozenset({Role.ADMIN, Role.HR, Role.OWNER})


def is_elevated(role: Role) -> bool:
    return role in ELEVATED_ROLES


def can_join_department(role: Role) -> bool:
    """Explicit department joins are for observers; staff join their own room automatically."""
    return is_elevated(role)


def can_override_target_department(role: Role) -> bool:
    return is_elevated(role)


def can_teardown_conversation(role: Role) -> bool:
    return role == Role.ADMIN


def auto_joins_department(role: Role) -> bool:
    return role == Role.STAFF


def can_message(role: Role, other_role: Role) -> bool:
    """Staff may only open conversations with admin or HR users."""
    if is_elevated(role):
        return True
    if role == Role.STAFF:
        return other_role in {Role.ADMIN, Role.HR}
    return False


def can_manage_notification(role: Role, *, requester_id: int, owner_id: int) -> bool:
    return role == Role.ADMIN or int(requester_id) == int(owner_id)
