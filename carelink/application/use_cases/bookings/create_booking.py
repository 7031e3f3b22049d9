"""Use case for booking a specific caregiver."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from carelink.domain.entities import BOOKING_STATUS_REQUESTED, Booking
from carelink.domain.exceptions import BadRequestError, NotFoundError
from carelink.infrastructure.repositories import BookingRepository, CaregiverRepository

DEFAULT_VISIT_DURATION = timedelta(hours=1)

logger = logging.getLogger(__name__)


def create_booking(
    session: Session,
    *,
    customer_id: int,
    caregiver_id: int,
    start_time: datetime,
    address: str,
    notes: str | None = None,
    is_emergency: bool = False,
) -> Booking:
    """Book ``caregiver_id`` for a one-hour visit starting at ``start_time``.

    The caregiver must exist and be verified, and must not already have an
    active booking starting within one visit of ``start_time``.
    """

    caregiver = CaregiverRepository(session).get(caregiver_id)
    if caregiver is None:
        raise NotFoundError("Caregiver not found")
    if not caregiver.verified:
        raise BadRequestError("Caregiver is not verified")

    repository = BookingRepository(session)
    if repository.has_active_booking_between(
        caregiver_id,
        start=start_time - DEFAULT_VISIT_DURATION,
        end=start_time + DEFAULT_VISIT_DURATION,
    ):
        raise BadRequestError("Caregiver is not available at the requested time")

    hours = DEFAULT_VISIT_DURATION.total_seconds() / 3600
    booking = repository.create(
        Booking(
            id=None,
            customer_id=customer_id,
            caregiver_id=caregiver_id,
            start_time=start_time,
            address=address,
            notes=notes,
            price_cents=int(round(caregiver.hourly_rate_cents * hours)),
            status=BOOKING_STATUS_REQUESTED,
            is_emergency=is_emergency,
        )
    )
    logger.info(
        "Created booking %s for customer %s with caregiver %s",
        booking.id,
        customer_id,
        caregiver_id,
    )
    return booking
