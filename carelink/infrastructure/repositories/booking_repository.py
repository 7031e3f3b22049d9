"""Persistence layer for bookings."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from carelink.domain.entities import (
    BOOKING_ACTIVE_STATUSES,
    Booking,
    BookingDetails,
    UserSummary,
)
from carelink.infrastructure.models import BookingModel, CaregiverProfileModel
from carelink.infrastructure.repositories.caregiver_repository import CaregiverRepository
from carelink.utils import ensure_utc, to_storage_datetime


class BookingRepository:
    """Provide persistence operations for :class:`Booking` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, booking_id: int) -> Booking | None:
        model = self.session.get(BookingModel, booking_id)
        return self._to_entity(model) if model else None

    def get_details(self, booking_id: int) -> BookingDetails | None:
        model = self._details_query().filter(BookingModel.id == booking_id).first()
        return self._to_details(model) if model else None

    def create(self, booking: Booking) -> Booking:
        model = BookingModel(
            customer_id=booking.customer_id,
            caregiver_id=booking.caregiver_id,
            start_time=to_storage_datetime(booking.start_time),
            address=booking.address,
            notes=booking.notes,
            price_cents=booking.price_cents,
            status=booking.status,
            is_emergency=booking.is_emergency,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def has_active_booking_between(
        self, caregiver_id: int, *, start: datetime, end: datetime
    ) -> bool:
        """Return ``True`` when the caregiver has an active booking starting in ``[start, end)``."""

        query = (
            self.session.query(BookingModel.id)
            .filter(BookingModel.caregiver_id == caregiver_id)
            .filter(BookingModel.status.in_(BOOKING_ACTIVE_STATUSES))
            .filter(BookingModel.start_time >= to_storage_datetime(start))
            .filter(BookingModel.start_time < to_storage_datetime(end))
        )
        return query.first() is not None

    def list_emergencies(
        self,
        *,
        statuses: Iterable[str],
        note_pattern: str,
        created_since: datetime,
        offset: int,
        limit: int,
    ) -> tuple[list[BookingDetails], int]:
        """Return a page of emergency bookings and the total number of matches."""

        query = (
            self.session.query(BookingModel)
            .filter(BookingModel.status.in_(list(statuses)))
            .filter(
                or_(
                    BookingModel.is_emergency.is_(True),
                    BookingModel.notes.ilike(f"%{note_pattern}%"),
                    BookingModel.created_at >= to_storage_datetime(created_since),
                )
            )
        )
        total = query.count()
        page = (
            query.options(
                joinedload(BookingModel.customer),
                joinedload(BookingModel.caregiver).joinedload(CaregiverProfileModel.user),
            )
            .order_by(BookingModel.created_at.desc(), BookingModel.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return [self._to_details(model) for model in page], total

    def _details_query(self):
        return self.session.query(BookingModel).options(
            joinedload(BookingModel.customer),
            joinedload(BookingModel.caregiver).joinedload(CaregiverProfileModel.user),
        )

    @staticmethod
    def _to_details(model: BookingModel) -> BookingDetails:
        customer = model.customer
        return BookingDetails(
            booking=BookingRepository._to_entity(model),
            customer=UserSummary(
                id=customer.id, name=customer.name, email=customer.email, phone=customer.phone
            )
            if customer is not None
            else None,
            caregiver=CaregiverRepository.to_summary(model.caregiver)
            if model.caregiver is not None
            else None,
        )

    @staticmethod
    def _to_entity(model: BookingModel) -> Booking:
        return Booking(
            id=model.id,
            customer_id=model.customer_id,
            caregiver_id=model.caregiver_id,
            start_time=ensure_utc(model.start_time),
            address=model.address,
            notes=model.notes,
            price_cents=model.price_cents,
            status=model.status,
            is_emergency=model.is_emergency,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )


__all__ = ["BookingRepository"]
