"""Domain entity representing a care booking."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .caregiver_profile import CaregiverSummary
from .user import UserSummary

BOOKING_STATUS_REQUESTED = "requested"
BOOKING_STATUS_CONFIRMED = "confirmed"
BOOKING_STATUS_IN_PROGRESS = "in_progress"
BOOKING_STATUS_COMPLETED = "completed"
BOOKING_STATUS_CANCELLED = "cancelled"

BOOKING_FORWARD_ORDER = (
    BOOKING_STATUS_REQUESTED,
    BOOKING_STATUS_CONFIRMED,
    BOOKING_STATUS_IN_PROGRESS,
    BOOKING_STATUS_COMPLETED,
)
BOOKING_TERMINAL_STATUSES = frozenset(
    {BOOKING_STATUS_COMPLETED, BOOKING_STATUS_CANCELLED}
)
BOOKING_ACTIVE_STATUSES = frozenset(
    {BOOKING_STATUS_REQUESTED, BOOKING_STATUS_CONFIRMED, BOOKING_STATUS_IN_PROGRESS}
)

EMERGENCY_MARKER = "[EMERGENCY]"


@dataclass
class Booking:
    """A request for care placed by a customer."""

    id: int | None
    customer_id: int
    caregiver_id: int | None
    start_time: datetime
    address: str
    notes: str | None
    price_cents: int
    status: str = BOOKING_STATUS_REQUESTED
    is_emergency: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.price_cents < 0:
            raise ValueError("price_cents cannot be negative")
        if self.status not in BOOKING_FORWARD_ORDER and self.status != BOOKING_STATUS_CANCELLED:
            raise ValueError(f"Unknown booking status '{self.status}'")

    @property
    def is_terminal(self) -> bool:
        return self.status in BOOKING_TERMINAL_STATUSES

    def can_transition_to(self, status: str) -> bool:
        """Return ``True`` when moving from the current status to ``status`` is allowed.

        Statuses only move forward along ``requested -> confirmed ->
        in_progress -> completed``; ``cancelled`` is reachable from any
        non-terminal status.
        """

        if self.is_terminal:
            return False
        if status == BOOKING_STATUS_CANCELLED:
            return True
        if status not in BOOKING_FORWARD_ORDER:
            return False
        return BOOKING_FORWARD_ORDER.index(status) > BOOKING_FORWARD_ORDER.index(
            self.status
        )


@dataclass(frozen=True)
class BookingDetails:
    """A booking populated with the display details of its participants."""

    booking: Booking
    customer: UserSummary | None
    caregiver: CaregiverSummary | None = None


__all__ = [
    "BOOKING_ACTIVE_STATUSES",
    "BOOKING_FORWARD_ORDER",
    "BOOKING_STATUS_CANCELLED",
    "BOOKING_STATUS_COMPLETED",
    "BOOKING_STATUS_CONFIRMED",
    "BOOKING_STATUS_IN_PROGRESS",
    "BOOKING_STATUS_REQUESTED",
    "BOOKING_TERMINAL_STATUSES",
    "Booking",
    "BookingDetails",
    "EMERGENCY_MARKER",
]
