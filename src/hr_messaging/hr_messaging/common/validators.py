from __future__ import annotations

from typing import Any

from ..core.constants import MAX_MESSAGE_LENGTH
from ..core.enums import MessageKind
from ..core.exceptions import ValidationError


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_id(value: Any, field_name: str) -> int:
    """Parse a positive integer id coming from a client payload."""
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} is invalid")
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid")
    if parsed <= 0:
        raise ValidationError(f"{field_name} is invalid")
    return parsed


def require_content(value: Any) -> str:
    content = require_non_empty(value, "Message")
    if len(content) > MAX_MESSAGE_LENGTH:
        raise ValidationError(f"Message exceeds {MAX_MESSAGE_LENGTH} characters")
    return content


def parse_message_kind(value: Any) -> MessageKind:
    if value is None or value == "":
        return MessageKind.TEXT
    try:
        return MessageKind(str(value))
    except ValueError:
        raise ValidationError("Message type is invalid")
