"""Tests for the multi-recipient notification dispatcher."""

from __future__ import annotations

import time

import pytest
from sqlalchemy.exc import OperationalError

from conftest import DASHBOARD_URL, RecordingEmailSender

from carelink.application.use_cases.notifications import (
    NotificationDispatcher,
    list_notifications,
    unique_recipient_ids,
)
from carelink.domain.entities import (
    CHANNEL_EMAIL,
    CHANNEL_IN_APP,
    NOTIFICATION_STATUS_UNREAD,
    NOTIFICATION_TITLE_MAX_LENGTH,
    NOTIFICATION_TYPE_BOOKING,
    NOTIFICATION_TYPE_EMERGENCY,
    ROLE_ADMIN,
    ROLE_CAREGIVER,
)
from carelink.infrastructure.repositories import NotificationRepository


class FlakyNotificationRepository(NotificationRepository):
    """Store that refuses to write rows for the given users."""

    def __init__(self, session, failing_user_ids) -> None:
        super().__init__(session)
        self.failing_user_ids = set(failing_user_ids)

    def create(self, notification):
        if notification.user_id in self.failing_user_ids:
            raise OperationalError("INSERT INTO notification", {}, Exception("database is locked"))
        return super().create(notification)


def _dispatcher(db_session, sender, **options) -> NotificationDispatcher:
    options.setdefault("email_timeout", 2.0)
    return NotificationDispatcher(db_session, sender, dashboard_url=DASHBOARD_URL, **options)


def test_unique_recipient_ids_keeps_first_seen_order() -> None:
    assert unique_recipient_ids([3, 1, 3, None, 2, 1, 0]) == [3, 1, 2]


def test_dispatch_stores_one_unread_row_per_recipient(dispatcher, db_session, make_user) -> None:
    caregivers = [make_user(ROLE_CAREGIVER) for _ in range(3)]
    admin = make_user(ROLE_ADMIN)
    recipients = [user.id for user in (*caregivers, admin)]

    report = dispatcher.dispatch(
        recipients,
        notification_type=NOTIFICATION_TYPE_BOOKING,
        title="New booking",
        message="A visit was booked",
        metadata={"bookingId": 11},
    )

    assert sorted(n.user_id for n in report.notifications) == sorted(recipients)
    assert not report.has_failures
    for user_id in recipients:
        page = list_notifications(db_session, user_id)
        assert page.unread_count == 1
        (stored,) = page.items
        assert stored.status == NOTIFICATION_STATUS_UNREAD
        assert stored.type == NOTIFICATION_TYPE_BOOKING
        assert stored.metadata == {"bookingId": 11}


def test_dispatch_deduplicates_recipients(dispatcher, db_session, email_sender, make_user) -> None:
    user = make_user(ROLE_ADMIN)

    report = dispatcher.dispatch(
        [user.id, user.id, user.id],
        notification_type=NOTIFICATION_TYPE_BOOKING,
        title="Reminder",
        message="Visit tomorrow",
        send_email=True,
    )

    assert len(report.notifications) == 1
    assert list_notifications(db_session, user.id).pagination.total == 1
    assert email_sender.recipients == [user.email]


def test_dispatch_without_recipients_does_nothing(dispatcher, email_sender) -> None:
    report = dispatcher.dispatch(
        [],
        notification_type=NOTIFICATION_TYPE_BOOKING,
        title="Nobody",
        message="Nothing to see",
        send_email=True,
    )

    assert report.notifications == []
    assert report.failures == []
    assert email_sender.sent == []


def test_dispatch_rejects_unknown_types(dispatcher, make_user) -> None:
    user = make_user()

    with pytest.raises(ValueError):
        dispatcher.dispatch([user.id], notification_type="marketing", title="Hi", message="Hello")


def test_email_is_skipped_unless_requested(dispatcher, email_sender, make_user) -> None:
    user = make_user()

    dispatcher.dispatch(
        [user.id],
        notification_type=NOTIFICATION_TYPE_BOOKING,
        title="Quiet",
        message="In-app only",
    )

    assert email_sender.sent == []


def test_long_titles_are_clipped(dispatcher, make_user) -> None:
    user = make_user()

    report = dispatcher.dispatch(
        [user.id],
        notification_type=NOTIFICATION_TYPE_BOOKING,
        title="x" * 500,
        message="Body",
    )

    (stored,) = report.notifications
    assert len(stored.title) == NOTIFICATION_TITLE_MAX_LENGTH
    assert stored.title.endswith("...")


def test_generic_notifications_use_the_title_as_subject(dispatcher, email_sender, make_user) -> None:
    user = make_user()

    dispatcher.dispatch(
        [user.id],
        notification_type=NOTIFICATION_TYPE_BOOKING,
        title="Booking confirmed",
        message="See you soon",
        send_email=True,
    )

    (sent,) = email_sender.sent
    assert sent["subject"] == "Booking confirmed"
    assert "See you soon" in sent["text"]
    assert DASHBOARD_URL in sent["html"]


def test_emergency_notifications_use_the_urgent_template(dispatcher, email_sender, make_user) -> None:
    user = make_user(ROLE_CAREGIVER, name="Carol")

    dispatcher.dispatch(
        [user.id],
        notification_type=NOTIFICATION_TYPE_EMERGENCY,
        title="Emergency Care Request",
        message="Emergency care request from Jane",
        metadata={
            "customerName": "Jane",
            "customerPhone": "555-0100",
            "address": "12 Elm Street, Springfield",
            "notes": "fell down",
        },
        send_email=True,
    )

    (sent,) = email_sender.sent
    assert sent["subject"] == "URGENT: Emergency Care Request from Jane"
    assert "Dear Carol" in sent["text"]
    assert "555-0100" in sent["text"]
    assert "12 Elm Street, Springfield" in sent["html"]


def test_email_failure_does_not_affect_other_recipients(db_session, make_user) -> None:
    first, second, third = (make_user(ROLE_CAREGIVER) for _ in range(3))
    sender = RecordingEmailSender(fail_for=[second.email], raise_for=[third.email])
    dispatcher = _dispatcher(db_session, sender)

    report = dispatcher.dispatch(
        [first.id, second.id, third.id],
        notification_type=NOTIFICATION_TYPE_BOOKING,
        title="Update",
        message="Something changed",
        send_email=True,
    )

    assert len(report.notifications) == 3
    assert report.emails_sent == 1
    failures = {failure.user_id: failure for failure in report.failures_for(CHANNEL_EMAIL)}
    assert set(failures) == {second.id, third.id}
    assert failures[second.id].reason == "delivery failed"
    assert "transport down" in failures[third.id].reason
    assert report.failures_for(CHANNEL_IN_APP) == []
    assert first.email in sender.recipients


def test_slow_email_times_out_without_blocking_the_rest(db_session, make_user) -> None:
    slow, fast = make_user(ROLE_ADMIN), make_user(ROLE_ADMIN)
    sender = RecordingEmailSender(block_for=[slow.email])
    dispatcher = _dispatcher(db_session, sender, email_timeout=0.2)

    try:
        report = dispatcher.dispatch(
            [slow.id, fast.id],
            notification_type=NOTIFICATION_TYPE_BOOKING,
            title="Heads up",
            message="Check the dashboard",
            send_email=True,
        )
    finally:
        sender.release()

    assert report.emails_sent == 1
    (failure,) = report.failures_for(CHANNEL_EMAIL)
    assert failure.user_id == slow.id
    assert failure.reason == "timed out"
    assert len(report.notifications) == 2


def test_many_hung_emails_do_not_starve_the_remaining_recipient(db_session, make_user) -> None:
    hung = [make_user(ROLE_CAREGIVER) for _ in range(8)]
    last = make_user(ROLE_CAREGIVER)
    sender = RecordingEmailSender(block_for=[user.email for user in hung])
    dispatcher = _dispatcher(db_session, sender, email_timeout=0.5)

    started = time.monotonic()
    try:
        report = dispatcher.dispatch(
            [user.id for user in (*hung, last)],
            notification_type=NOTIFICATION_TYPE_BOOKING,
            title="Heads up",
            message="Check the dashboard",
            send_email=True,
        )
    finally:
        sender.release()
    elapsed = time.monotonic() - started

    assert sender.recipients == [last.email]
    assert report.emails_sent == 1
    failures = report.failures_for(CHANNEL_EMAIL)
    assert sorted(failure.user_id for failure in failures) == sorted(user.id for user in hung)
    assert all(failure.reason == "timed out" for failure in failures)
    assert elapsed < 3


def test_storage_failure_for_one_recipient_keeps_the_others(db_session, email_sender, make_user) -> None:
    broken, healthy = make_user(ROLE_CAREGIVER), make_user(ROLE_CAREGIVER)
    dispatcher = _dispatcher(
        db_session,
        email_sender,
        store=FlakyNotificationRepository(db_session, [broken.id]),
    )

    report = dispatcher.dispatch(
        [broken.id, healthy.id],
        notification_type=NOTIFICATION_TYPE_BOOKING,
        title="Update",
        message="Something changed",
        send_email=True,
    )

    assert [n.user_id for n in report.notifications] == [healthy.id]
    (failure,) = report.failures_for(CHANNEL_IN_APP)
    assert failure.user_id == broken.id
    assert sorted(email_sender.recipients) == sorted([broken.email, healthy.email])
    assert list_notifications(db_session, broken.id).pagination.total == 0
    assert list_notifications(db_session, healthy.id).pagination.total == 1


def test_recipient_without_an_account_is_reported(dispatcher, email_sender, make_user) -> None:
    user = make_user()

    report = dispatcher.dispatch(
        [user.id, 9999],
        notification_type=NOTIFICATION_TYPE_BOOKING,
        title="Update",
        message="Something changed",
        send_email=True,
    )

    assert email_sender.recipients == [user.email]
    (failure,) = report.failures_for(CHANNEL_EMAIL)
    assert failure.user_id == 9999
    assert failure.reason == "no email address"


def test_publisher_errors_do_not_interrupt_dispatch(db_session, email_sender, make_user) -> None:
    class BrokenPublisher:
        def publish(self, notification) -> None:
            raise RuntimeError("socket closed")

    users = [make_user(), make_user()]
    dispatcher = _dispatcher(db_session, email_sender, publisher=BrokenPublisher())

    report = dispatcher.dispatch(
        [user.id for user in users],
        notification_type=NOTIFICATION_TYPE_BOOKING,
        title="Update",
        message="Something changed",
    )

    assert len(report.notifications) == 2
    assert not report.has_failures
