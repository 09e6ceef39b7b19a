from __future__ import annotations

from datetime import datetime

import pytest

from conftest import ADMIN, HR, SAM
from src.hr_messaging.hr_messaging.core.enums import NotificationKind, Role
from src.hr_messaging.hr_messaging.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.hr_messaging.hr_messaging.notifications import producers
from src.hr_messaging.hr_messaging.notifications.bus import NotificationBus
from src.hr_messaging.hr_messaging.notifications.model import NotificationEvent
from src.hr_messaging.hr_messaging.notifications.service import parse_notification_kind
from src.hr_messaging.hr_messaging.users.model import Identity


def _event(user_id=SAM):
    return NotificationEvent(
        notification_id=1,
        user_id=user_id,
        message="hi",
        kind=NotificationKind.INFO,
        created_at=datetime(2026, 3, 2, 9, 0, 0),
    )


def test_bus_delivers_to_every_subscriber():
    bus = NotificationBus()
    seen_a, seen_b = [], []
    bus.subscribe(seen_a.append)
    bus.subscribe(seen_b.append)

    assert bus.publish(_event()) == 2
    assert seen_a == seen_b == [_event()]


def test_bus_isolates_failing_subscriber():
    bus = NotificationBus()
    seen = []

    def broken(_event):
        raise RuntimeError("boom")

    bus.subscribe(broken)
    bus.subscribe(seen.append)

    assert bus.publish(_event()) == 1
    assert seen == [_event()]


def test_unsubscribe_during_publish_uses_snapshot():
    bus = NotificationBus()
    seen = []
    unsubscribe_second = None

    def first(event):
        unsubscribe_second()

    bus.subscribe(first)
    unsubscribe_second = bus.subscribe(seen.append)

    bus.publish(_event())
    assert seen == [_event()]
    assert bus.subscriber_count == 1

    bus.publish(_event())
    assert seen == [_event()]


def test_closed_bus_rejects_subscribers():
    bus = NotificationBus()
    bus.subscribe(lambda e: None)
    bus.close()

    assert bus.subscriber_count == 0
    with pytest.raises(RuntimeError):
        bus.subscribe(lambda e: None)


def test_parse_notification_kind():
    assert parse_notification_kind(None) is NotificationKind.INFO
    assert parse_notification_kind("department-chat") is NotificationKind.DEPARTMENT_CHAT
    with pytest.raises(ValidationError):
        parse_notification_kind("party")


def test_publish_persists_before_publishing(notification_service, notification_repo, bus):
    stored_at_publish = []
    bus.subscribe(lambda e: stored_at_publish.append(notification_repo.get_by_id(e.notification_id)))

    record = notification_service.publish(SAM, "Shift changed", "info")

    assert stored_at_publish == [record]
    assert record.kind is NotificationKind.INFO


def test_publish_validates_input(notification_service, notification_repo):
    with pytest.raises(ValidationError):
        notification_service.publish(SAM, "  ")
    with pytest.raises(ValidationError):
        notification_service.publish(0, "hello")
    with pytest.raises(ValidationError):
        notification_service.publish(SAM, "hello", "party")
    assert notification_repo.rows == {}


def test_mark_read_by_owner(notification_service):
    record = notification_service.publish(SAM, "hello")
    owner = Identity(user_id=SAM, role=Role.STAFF)

    assert notification_service.mark_read(owner, record.notification_id) is True
    assert notification_service.mark_read(owner, record.notification_id) is False


def test_mark_read_by_other_user_is_forbidden(notification_service):
    record = notification_service.publish(SAM, "hello")

    with pytest.raises(AuthorizationError):
        notification_service.mark_read(Identity(user_id=HR, role=Role.HR), record.notification_id)
    assert notification_service.mark_read(Identity(user_id=ADMIN, role=Role.ADMIN), record.notification_id)


def test_mark_read_unknown_notification(notification_service):
    with pytest.raises(NotFoundError):
        notification_service.mark_read(Identity(user_id=SAM, role=Role.STAFF), 77)


def test_producers_map_workflow_events(notification_service):
    approved = producers.notify_leave_decision(notification_service, user_id=SAM, approved=True, note="enjoy")
    rejected = producers.notify_leave_decision(notification_service, user_id=SAM, approved=False)
    salary = producers.notify_salary_event(notification_service, user_id=SAM, event="paid", period="2026-02")
    fence = producers.notify_geofence_breach(notification_service, supervisor_id=HR, staff_name="Sam", distance_m=412.4)

    assert approved.kind is NotificationKind.LEAVE_APPROVED
    assert approved.message == "Your leave request was approved: enjoy"
    assert rejected.kind is NotificationKind.LEAVE_REJECTED
    assert salary.kind is NotificationKind.SALARY_PAID
    assert fence.message == "Sam is 412 m outside the office geofence"


def test_unknown_salary_event_is_rejected(notification_service):
    with pytest.raises(ValidationError):
        producers.notify_salary_event(notification_service, user_id=SAM, event="bonus", period="2026-02")
