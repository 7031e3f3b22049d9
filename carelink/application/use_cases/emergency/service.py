"""Emergency care requests: booking creation and audience alerting."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from carelink.application.use_cases.bookings import create_booking
from carelink.application.use_cases.notifications import (
    NotificationDispatcher,
    unique_recipient_ids,
)
from carelink.domain.entities import (
    BOOKING_STATUS_CONFIRMED,
    BOOKING_STATUS_REQUESTED,
    EMERGENCY_MARKER,
    NOTIFICATION_TYPE_EMERGENCY,
    ROLE_ADMIN,
    Booking,
    BookingDetails,
    BroadcastTarget,
    CaregiverTarget,
    DispatchReport,
    EmergencyTarget,
    Pagination,
    User,
    target_for,
)
from carelink.domain.exceptions import NotFoundError
from carelink.infrastructure.repositories import (
    BookingRepository,
    CaregiverRepository,
    UserRepository,
)
from carelink.utils import utc_now

from .validators import ensure_valid_address, normalize_notes

logger = logging.getLogger(__name__)

DEFAULT_EMERGENCY_NOTES = "Emergency care request"
EMERGENCY_TITLE = "Emergency Care Request"
EMERGENCY_LISTED_STATUSES = (BOOKING_STATUS_REQUESTED, BOOKING_STATUS_CONFIRMED)
EMERGENCY_RECENT_WINDOW = timedelta(hours=24)


class EmergencyRequestService:
    """Create emergency bookings and alert every verified caregiver and active admin."""

    def __init__(
        self,
        session: Session,
        dispatcher: NotificationDispatcher,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._session = session
        self._dispatcher = dispatcher
        self._clock = clock
        self._users = UserRepository(session)
        self._caregivers = CaregiverRepository(session)
        self._bookings = BookingRepository(session)

    def create_emergency_request(
        self,
        customer_id: int,
        *,
        address: str,
        caregiver_id: int | None = None,
        notes: str | None = None,
        phone: str | None = None,
    ) -> BookingDetails:
        """Record an emergency booking for ``customer_id`` and alert the audience.

        The booking is committed before anyone is notified. Failures while
        resolving the audience or dispatching are logged and never undo the
        booking, so the emergency stays on record even if nobody was reached.
        """

        customer = self._users.get(customer_id)
        if customer is None:
            raise NotFoundError("Customer not found")

        address = ensure_valid_address(address)
        notes = normalize_notes(notes)
        phone = normalize_notes(phone)

        booking = self._create_booking(customer, target_for(caregiver_id), address, notes)
        logger.info(
            "Emergency booking %s created for customer %s (caregiver: %s)",
            booking.id,
            customer.id,
            caregiver_id or "broadcast",
        )

        try:
            self._alert_audience(customer, booking, address=address, notes=notes, phone=phone)
        except Exception:  # booking stays committed
            self._session.rollback()
            logger.exception("Failed to alert the audience of emergency booking %s", booking.id)

        details = self._bookings.get_details(booking.id)
        if details is None:  # pragma: no cover - the row was committed above
            return BookingDetails(booking=booking, customer=None)
        return details

    def list_emergency_requests(
        self, *, page: int = 1, limit: int = 20
    ) -> tuple[list[BookingDetails], Pagination]:
        """Return open emergency bookings, newest first.

        A booking is listed while it is ``requested`` or ``confirmed`` and it
        is flagged as an emergency, mentions "emergency" in its notes, or was
        created within the last 24 hours.
        """

        offset = (page - 1) * limit
        items, total = self._bookings.list_emergencies(
            statuses=EMERGENCY_LISTED_STATUSES,
            note_pattern="emergency",
            created_since=self._clock() - EMERGENCY_RECENT_WINDOW,
            offset=offset,
            limit=limit,
        )
        return items, Pagination(page=page, limit=limit, total=total)

    def resolve_audience(self) -> list[int]:
        """Return the user ids of verified caregivers followed by active admins."""

        caregiver_user_ids = [summary.user.id for summary in self._caregivers.list_verified()]
        admin_ids = self._users.list_ids_by_role_alias(ROLE_ADMIN, active_only=True)
        return unique_recipient_ids([*caregiver_user_ids, *admin_ids])

    def _create_booking(
        self,
        customer: User,
        target: EmergencyTarget,
        address: str,
        notes: str | None,
    ) -> Booking:
        now = self._clock()
        base_notes = notes or DEFAULT_EMERGENCY_NOTES

        if isinstance(target, CaregiverTarget):
            return create_booking(
                self._session,
                customer_id=customer.id,
                caregiver_id=target.caregiver_id,
                start_time=now,
                address=address,
                notes=base_notes,
                is_emergency=True,
            )

        if isinstance(target, BroadcastTarget):
            # Price is settled once a caregiver accepts the request.
            return self._bookings.create(
                Booking(
                    id=None,
                    customer_id=customer.id,
                    caregiver_id=None,
                    start_time=now,
                    address=address,
                    notes=f"{base_notes} {EMERGENCY_MARKER}",
                    price_cents=0,
                    status=BOOKING_STATUS_REQUESTED,
                    is_emergency=True,
                )
            )

        raise TypeError(f"Unsupported emergency target: {target!r}")

    def _alert_audience(
        self,
        customer: User,
        booking: Booking,
        *,
        address: str,
        notes: str | None,
        phone: str | None,
    ) -> DispatchReport | None:
        recipients = self.resolve_audience()
        if not recipients:
            logger.warning("No caregivers or admins to alert for emergency booking %s", booking.id)
            return None

        details = f"Details: {notes}" if notes else "Please respond immediately."
        message = f"Emergency care request from {customer.name} at {address}. {details}"
        metadata = {
            "bookingId": booking.id,
            "customerId": customer.id,
            "customerName": customer.name,
            "customerPhone": phone or customer.phone,
            "address": address,
            "notes": notes,
            "caregiverId": booking.caregiver_id,
        }
        return self._dispatcher.dispatch(
            recipients,
            notification_type=NOTIFICATION_TYPE_EMERGENCY,
            title=EMERGENCY_TITLE,
            message=message,
            metadata=metadata,
            send_email=True,
        )


__all__ = [
    "DEFAULT_EMERGENCY_NOTES",
    "EMERGENCY_TITLE",
    "EmergencyRequestService",
]
