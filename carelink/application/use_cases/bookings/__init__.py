"""Use cases for creating bookings."""

from .create_booking import DEFAULT_VISIT_DURATION, create_booking

__all__ = ["DEFAULT_VISIT_DURATION", "create_booking"]
