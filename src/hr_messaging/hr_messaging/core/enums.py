from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "admin"
    HR = "hr"
    OWNER = "owner"
    STAFF = "staff"


class MessageKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    FILE = "file"


class NotificationKind(str, Enum):
    """Closed set of notification kinds accepted by the bridge."""

    LEAVE_APPROVED = "leave_approved"
    LEAVE_REJECTED = "leave_rejected"
    LEAVE_REQUEST = "leave_request"
    ATTENDANCE_EDIT = "attendance_edit"
    TASK_ASSIGNED = "task_assigned"
    TASK_COMPLETED = "task_completed"
    INFO = "info"
    SALARY_GENERATED = "salary_generated"
    SALARY_APPROVED = "salary_approved"
    SALARY_PAID = "salary_paid"
    SALARY_RECEIVED = "salary_received"
    SALARY_REQUESTED = "salary_requested"
    SALARY_ISSUE = "salary_issue"
    CHAT = "chat"
    DEPARTMENT_CHAT = "department-chat"
    GEOFENCE_ALERT = "geofence_alert"


class SessionState(str, Enum):
    """Lifecycle of one realtime connection."""

    CONNECTING = "CONNECTING"
    AUTHENTICATED = "AUTHENTICATED"
    JOINED = "JOINED"
    DISCONNECTED = "DISCONNECTED"
