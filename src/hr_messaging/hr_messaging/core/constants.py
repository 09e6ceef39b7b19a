"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

DEPARTMENT_GROUP_PREFIX = "dept-"
USER_ROOM_PREFIX = "user:"
DEPARTMENT_ROOM_PREFIX = "dept:"

CONVERSATION_KEY_SEPARATOR = ":"

NEW_CHAT_MESSAGE_TEXT = "New chat message received"
NEW_DEPARTMENT_MESSAGE_TEXT = "New message in {department} department"
DEFAULT_SENDER_NAME = "Staff Member"

DEFAULT_NOTIFY_FANOUT_WORKERS = 8
DEFAULT_NOTIFY_FANOUT_TIMEOUT_SECONDS = 2.0
DEFAULT_HISTORY_LIMIT = 200
MAX_MESSAGE_LENGTH = 5000


def user_room(user_id: int) -> str:
    return f"{USER_ROOM_PREFIX}{user_id}"


def department_room(group_id: str) -> str:
    return f"{DEPARTMENT_ROOM_PREFIX}{group_id}"
