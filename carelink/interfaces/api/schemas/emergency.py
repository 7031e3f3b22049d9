"""Pydantic models for emergency requests and the bookings they create."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from carelink.application.use_cases.emergency import ADDRESS_MIN_LENGTH

from .common import CamelModel, PaginationRead


class EmergencyRequestCreate(CamelModel):
    """Body of ``POST /emergency``."""

    caregiver_id: int | None = Field(default=None, ge=1)
    address: str = Field(..., min_length=ADDRESS_MIN_LENGTH, max_length=500)
    notes: str | None = Field(default=None, max_length=2000)
    phone: str | None = Field(default=None, max_length=30)


class UserSummaryRead(CamelModel):
    id: int
    name: str
    email: str
    phone: str | None = None


class CaregiverSummaryRead(CamelModel):
    id: int
    verified: bool
    hourly_rate_cents: int
    user: UserSummaryRead


class BookingRead(CamelModel):
    """Booking populated with the customer and, when assigned, the caregiver."""

    id: int
    customer_id: int
    caregiver_id: int | None = None
    start_time: datetime
    address: str
    notes: str | None = None
    price_cents: int
    status: str
    is_emergency: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
    customer: UserSummaryRead | None = None
    caregiver: CaregiverSummaryRead | None = None


class EmergencyRequestResponse(CamelModel):
    success: bool = True
    data: BookingRead
    message: str


class EmergencyRequestListResponse(CamelModel):
    success: bool = True
    data: list[BookingRead]
    pagination: PaginationRead


__all__ = [
    "BookingRead",
    "CaregiverSummaryRead",
    "EmergencyRequestCreate",
    "EmergencyRequestListResponse",
    "EmergencyRequestResponse",
    "UserSummaryRead",
]
