"""Tests for booking status rules and the caregiver booking use case."""

from __future__ import annotations

from datetime import timedelta

import pytest

from carelink.application.use_cases.bookings import create_booking
from carelink.domain.entities import (
    BOOKING_STATUS_CANCELLED,
    BOOKING_STATUS_COMPLETED,
    BOOKING_STATUS_CONFIRMED,
    BOOKING_STATUS_IN_PROGRESS,
    BOOKING_STATUS_REQUESTED,
    ROLE_CUSTOMER,
    Booking,
    BroadcastTarget,
    CaregiverTarget,
    target_for,
)
from carelink.domain.exceptions import BadRequestError, NotFoundError
from carelink.utils import utc_now


def _booking(status: str = BOOKING_STATUS_REQUESTED, price_cents: int = 0) -> Booking:
    return Booking(
        id=1,
        customer_id=1,
        caregiver_id=None,
        start_time=utc_now(),
        address="12 Elm Street, Springfield",
        notes=None,
        price_cents=price_cents,
        status=status,
    )


@pytest.mark.parametrize(
    ("current", "target", "allowed"),
    [
        (BOOKING_STATUS_REQUESTED, BOOKING_STATUS_CONFIRMED, True),
        (BOOKING_STATUS_CONFIRMED, BOOKING_STATUS_IN_PROGRESS, True),
        (BOOKING_STATUS_IN_PROGRESS, BOOKING_STATUS_COMPLETED, True),
        (BOOKING_STATUS_CONFIRMED, BOOKING_STATUS_REQUESTED, False),
        (BOOKING_STATUS_REQUESTED, BOOKING_STATUS_CANCELLED, True),
        (BOOKING_STATUS_IN_PROGRESS, BOOKING_STATUS_CANCELLED, True),
        (BOOKING_STATUS_COMPLETED, BOOKING_STATUS_CANCELLED, False),
        (BOOKING_STATUS_CANCELLED, BOOKING_STATUS_CONFIRMED, False),
        (BOOKING_STATUS_REQUESTED, "archived", False),
    ],
)
def test_status_transitions(current: str, target: str, allowed: bool) -> None:
    assert _booking(current).can_transition_to(target) is allowed


def test_negative_price_is_rejected() -> None:
    with pytest.raises(ValueError):
        _booking(price_cents=-1)


def test_unknown_status_is_rejected() -> None:
    with pytest.raises(ValueError):
        _booking(status="archived")


def test_target_for_picks_the_variant() -> None:
    assert target_for(None) == BroadcastTarget()
    assert target_for(7) == CaregiverTarget(caregiver_id=7)


def test_create_booking_prices_a_one_hour_visit(db_session, make_user, make_caregiver) -> None:
    customer = make_user(ROLE_CUSTOMER)
    _, profile = make_caregiver(hourly_rate_cents=4200)

    booking = create_booking(
        db_session,
        customer_id=customer.id,
        caregiver_id=profile.id,
        start_time=utc_now() + timedelta(days=1),
        address="12 Elm Street, Springfield",
    )

    assert booking.id is not None
    assert booking.price_cents == 4200
    assert booking.status == BOOKING_STATUS_REQUESTED
    assert booking.is_emergency is False


def test_create_booking_requires_a_verified_caregiver(db_session, make_user, make_caregiver) -> None:
    customer = make_user(ROLE_CUSTOMER)
    _, profile = make_caregiver(verified=False)

    with pytest.raises(BadRequestError, match="not verified"):
        create_booking(
            db_session,
            customer_id=customer.id,
            caregiver_id=profile.id,
            start_time=utc_now(),
            address="12 Elm Street, Springfield",
        )


def test_create_booking_for_missing_caregiver(db_session, make_user) -> None:
    customer = make_user(ROLE_CUSTOMER)

    with pytest.raises(NotFoundError):
        create_booking(
            db_session,
            customer_id=customer.id,
            caregiver_id=321,
            start_time=utc_now(),
            address="12 Elm Street, Springfield",
        )


def test_overlapping_bookings_are_rejected(db_session, make_user, make_caregiver) -> None:
    customer = make_user(ROLE_CUSTOMER)
    _, profile = make_caregiver()
    start = utc_now() + timedelta(days=1)
    options = dict(
        customer_id=customer.id,
        caregiver_id=profile.id,
        address="12 Elm Street, Springfield",
    )

    create_booking(db_session, start_time=start, **options)

    with pytest.raises(BadRequestError, match="not available"):
        create_booking(db_session, start_time=start + timedelta(minutes=45), **options)

    later = create_booking(db_session, start_time=start + timedelta(hours=2), **options)
    assert later.id is not None
