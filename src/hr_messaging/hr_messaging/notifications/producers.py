"""Helpers used by HR workflows to raise notifications.

Each helper maps a workflow event onto the closed notification kind set and
goes through ``NotificationService.publish`` like any other producer.
"""

from __future__ import annotations

from typing import Optional

from ..core.enums import NotificationKind
from ..core.exceptions import ValidationError
from .model import NotificationRecord
from .service import NotificationService

_SALARY_KINDS = {
    "generated": NotificationKind.SALARY_GENERATED,
    "approved": NotificationKind.SALARY_APPROVED,
    "paid": NotificationKind.SALARY_PAID,
    "received": NotificationKind.SALARY_RECEIVED,
    "requested": NotificationKind.SALARY_REQUESTED,
    "issue": NotificationKind.SALARY_ISSUE,
}


def notify_leave_request(service: NotificationService, *, approver_id: int, requester_name: str) -> NotificationRecord:
    return service.publish(approver_id, f"New leave request from {requester_name}", NotificationKind.LEAVE_REQUEST)


def notify_leave_decision(
    service: NotificationService,
    *,
    user_id: int,
    approved: bool,
    note: Optional[str] = None,
) -> NotificationRecord:
    text = "Your leave request was approved" if approved else "Your leave request was rejected"
    if note:
        text = f"{text}: {note}"
    kind = NotificationKind.LEAVE_APPROVED if approved else NotificationKind.LEAVE_REJECTED
    return service.publish(user_id, text, kind)


def notify_attendance_edit(service: NotificationService, *, user_id: int, work_date: str) -> NotificationRecord:
    return service.publish(user_id, f"Your attendance for {work_date} was updated", NotificationKind.ATTENDANCE_EDIT)


def notify_task_assigned(service: NotificationService, *, user_id: int, title: str) -> NotificationRecord:
    return service.publish(user_id, f"New task assigned: {title}", NotificationKind.TASK_ASSIGNED)


def notify_task_completed(service: NotificationService, *, user_id: int, title: str, by_name: str) -> NotificationRecord:
    return service.publish(user_id, f"{by_name} completed task: {title}", NotificationKind.TASK_COMPLETED)


def notify_salary_event(service: NotificationService, *, user_id: int, event: str, period: str) -> NotificationRecord:
    kind = _SALARY_KINDS.get(event)
    if kind is None:
        raise ValidationError(f"Unknown salary event: {event!r}")
    return service.publish(user_id, f"Salary {event} for {period}", kind)


def notify_geofence_breach(
    service: NotificationService,
    *,
    supervisor_id: int,
    staff_name: str,
    distance_m: float,
) -> NotificationRecord:
    return service.publish(
        supervisor_id,
        f"{staff_name} is {distance_m:.0f} m outside the office geofence",
        NotificationKind.GEOFENCE_ALERT,
    )
