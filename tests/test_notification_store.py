"""Tests for listing and managing a user's stored notifications."""

from __future__ import annotations

import pytest

from carelink.application.use_cases.notifications import (
    delete_notification,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)
from carelink.domain.entities import (
    NOTIFICATION_STATUS_READ,
    NOTIFICATION_STATUS_UNREAD,
    NOTIFICATION_TYPE_SYSTEM,
    Notification,
)
from carelink.domain.exceptions import NotFoundError
from carelink.infrastructure.repositories import NotificationRepository


def _store(db_session, user_id: int, count: int) -> list[Notification]:
    repository = NotificationRepository(db_session)
    return [
        repository.create(
            Notification(
                id=None,
                user_id=user_id,
                type=NOTIFICATION_TYPE_SYSTEM,
                title=f"Notice {index}",
                message=f"Message {index}",
            )
        )
        for index in range(count)
    ]


def test_pagination_returns_the_remaining_items_on_the_last_page(db_session, make_user) -> None:
    user = make_user()
    _store(db_session, user.id, 15)

    result = list_notifications(db_session, user.id, page=2, limit=10)

    assert len(result.items) == 5
    assert result.pagination.total == 15
    assert result.pagination.total_pages == 2
    assert result.unread_count == 15


def test_listing_is_newest_first_and_scoped_to_the_owner(db_session, make_user) -> None:
    owner = make_user()
    other = make_user()
    stored = _store(db_session, owner.id, 3)
    _store(db_session, other.id, 2)

    result = list_notifications(db_session, owner.id)

    assert [item.id for item in result.items] == [n.id for n in reversed(stored)]
    assert {item.user_id for item in result.items} == {owner.id}
    assert result.pagination.total == 3


def test_unread_count_ignores_the_unread_filter(db_session, make_user) -> None:
    user = make_user()
    stored = _store(db_session, user.id, 4)
    mark_notification_read(db_session, stored[0].id, user.id)

    everything = list_notifications(db_session, user.id)
    unread_only = list_notifications(db_session, user.id, unread_only=True)

    assert everything.pagination.total == 4
    assert everything.unread_count == 3
    assert unread_only.pagination.total == 3
    assert unread_only.unread_count == 3
    assert all(item.status == NOTIFICATION_STATUS_UNREAD for item in unread_only.items)


def test_empty_listing_has_zero_pages(db_session, make_user) -> None:
    user = make_user()

    result = list_notifications(db_session, user.id, page=1, limit=10)

    assert result.items == []
    assert result.pagination.total_pages == 0
    assert result.unread_count == 0


def test_mark_read_updates_status_and_timestamp(db_session, make_user) -> None:
    user = make_user()
    (stored,) = _store(db_session, user.id, 1)

    updated = mark_notification_read(db_session, stored.id, user.id)

    assert updated.status == NOTIFICATION_STATUS_READ
    assert updated.updated_at is not None


def test_mark_read_of_another_users_notification_is_not_found(db_session, make_user) -> None:
    owner = make_user()
    intruder = make_user()
    (stored,) = _store(db_session, owner.id, 1)

    with pytest.raises(NotFoundError):
        mark_notification_read(db_session, stored.id, intruder.id)

    (untouched,) = list_notifications(db_session, owner.id).items
    assert untouched.status == NOTIFICATION_STATUS_UNREAD


def test_mark_all_read_is_idempotent_and_scoped(db_session, make_user) -> None:
    user = make_user()
    other = make_user()
    _store(db_session, user.id, 3)
    _store(db_session, other.id, 2)

    assert mark_all_notifications_read(db_session, user.id) == 3
    assert mark_all_notifications_read(db_session, user.id) == 0

    assert list_notifications(db_session, user.id).unread_count == 0
    assert list_notifications(db_session, other.id).unread_count == 2


def test_delete_removes_only_owned_notifications(db_session, make_user) -> None:
    owner = make_user()
    intruder = make_user()
    first, second = _store(db_session, owner.id, 2)

    with pytest.raises(NotFoundError):
        delete_notification(db_session, first.id, intruder.id)

    delete_notification(db_session, first.id, owner.id)

    remaining = list_notifications(db_session, owner.id)
    assert [item.id for item in remaining.items] == [second.id]

    with pytest.raises(NotFoundError):
        delete_notification(db_session, first.id, owner.id)


def test_metadata_round_trips_through_storage(db_session, make_user) -> None:
    user = make_user()
    stored = NotificationRepository(db_session).create(
        Notification(
            id=None,
            user_id=user.id,
            type=NOTIFICATION_TYPE_SYSTEM,
            title="Booking update",
            message="Your visit moved",
            metadata={"bookingId": 7, "address": "12 Elm Street"},
        )
    )

    (listed,) = list_notifications(db_session, user.id).items

    assert listed.id == stored.id
    assert listed.metadata == {"bookingId": 7, "address": "12 Elm Street"}
