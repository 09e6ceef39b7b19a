from __future__ import annotations

import pytest

from conftest import ADMIN, GONE, HR, IAN, SAM, SUE
from src.hr_messaging.hr_messaging.conversations.directory import (
    conversation_key,
    department_group_id,
    is_department_group_id,
)
from src.hr_messaging.hr_messaging.core.enums import Role
from src.hr_messaging.hr_messaging.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.hr_messaging.hr_messaging.users.model import Identity


def test_conversation_key_is_order_independent():
    assert conversation_key(7, 3) == conversation_key(3, 7) == "3:7"


def test_conversation_key_keeps_distinct_pairs_apart():
    assert conversation_key(1, 23) != conversation_key(12, 3)
    assert conversation_key(12, 3) == "12:3"


def test_department_group_id_normalizes_case_and_whitespace():
    assert department_group_id("Sales") == "dept-sales"
    assert department_group_id("  Human   Resources ") == "dept-human-resources"
    assert department_group_id("SALES") == department_group_id("sales")


def test_department_group_id_rejects_blank():
    with pytest.raises(ValidationError):
        department_group_id("   ")


def test_is_department_group_id():
    assert is_department_group_id("dept-sales")
    assert not is_department_group_id("dept-")
    assert not is_department_group_id("dept-Sales")
    assert not is_department_group_id("sales")


def test_find_or_create_returns_same_conversation_either_way(directory, conversations_repo):
    first = directory.find_or_create(SAM, HR)
    second = directory.find_or_create(HR, SAM)

    assert first.conversation_id == second.conversation_id
    assert conversations_repo.create_calls == 1
    assert first.participant_key == conversation_key(SAM, HR)


def test_find_or_create_rejects_self_conversation(directory):
    with pytest.raises(ValidationError):
        directory.find_or_create(SAM, SAM)


def test_find_or_create_recovers_from_concurrent_insert(directory, conversations_repo):
    conversations_repo.lose_next_create = True

    conversation = directory.find_or_create(SAM, HR)

    assert conversation.includes(SAM) and conversation.includes(HR)
    assert conversations_repo.get_by_key(conversation_key(SAM, HR)) == conversation


def test_get_for_participant_rejects_outsiders(directory):
    conversation = directory.find_or_create(SAM, HR)

    with pytest.raises(AuthorizationError):
        directory.get_for_participant(conversation.conversation_id, SUE)


def test_get_rejects_malformed_and_unknown_ids(directory):
    with pytest.raises(ValidationError):
        directory.get("abc")
    with pytest.raises(NotFoundError):
        directory.get(999)


def test_staff_may_open_conversation_with_hr_and_admin(directory):
    staff = Identity(user_id=SAM, role=Role.STAFF)

    assert directory.open_conversation(staff, HR).includes(HR)
    assert directory.open_conversation(staff, str(ADMIN)).includes(ADMIN)


def test_staff_cannot_open_conversation_with_staff(directory):
    with pytest.raises(AuthorizationError):
        directory.open_conversation(Identity(user_id=SAM, role=Role.STAFF), IAN)


def test_open_conversation_with_inactive_user_is_not_found(directory):
    with pytest.raises(NotFoundError):
        directory.open_conversation(Identity(user_id=HR, role=Role.HR), GONE)


def test_history_is_limited_to_participants(directory, conversations_repo):
    conversation = directory.find_or_create(SAM, HR)

    assert list(directory.history(Identity(user_id=HR, role=Role.HR), conversation.conversation_id)) == []
    with pytest.raises(AuthorizationError):
        directory.history(Identity(user_id=ADMIN, role=Role.ADMIN), conversation.conversation_id)
