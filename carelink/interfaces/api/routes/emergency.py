"""Endpoints for submitting and reviewing emergency care requests."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from carelink.application.use_cases.emergency import EmergencyRequestService
from carelink.domain.entities import BookingDetails, User
from carelink.domain.exceptions import BadRequestError, NotFoundError
from carelink.interfaces.api.dependencies import (
    get_current_active_user,
    get_emergency_service,
)
from carelink.interfaces.api.schemas import (
    BookingRead,
    CaregiverSummaryRead,
    EmergencyRequestCreate,
    EmergencyRequestListResponse,
    EmergencyRequestResponse,
    PaginationRead,
    UserSummaryRead,
)

router = APIRouter(prefix="/emergency", tags=["emergency"])
logger = logging.getLogger(__name__)


def _booking_to_schema(details: BookingDetails) -> BookingRead:
    booking = details.booking
    return BookingRead(
        id=booking.id or 0,
        customer_id=booking.customer_id,
        caregiver_id=booking.caregiver_id,
        start_time=booking.start_time,
        address=booking.address,
        notes=booking.notes,
        price_cents=booking.price_cents,
        status=booking.status,
        is_emergency=booking.is_emergency,
        created_at=booking.created_at,
        updated_at=booking.updated_at,
        customer=UserSummaryRead.model_validate(details.customer) if details.customer else None,
        caregiver=CaregiverSummaryRead.model_validate(details.caregiver)
        if details.caregiver
        else None,
    )


@router.post("", response_model=EmergencyRequestResponse, status_code=status.HTTP_201_CREATED)
def create_emergency_request(
    payload: EmergencyRequestCreate,
    service: EmergencyRequestService = Depends(get_emergency_service),
    current_user: User = Depends(get_current_active_user),
) -> EmergencyRequestResponse:
    """Record an emergency request and alert every caregiver and admin."""

    try:
        details = service.create_emergency_request(
            current_user.id,
            address=payload.address,
            caregiver_id=payload.caregiver_id,
            notes=payload.notes,
            phone=payload.phone,
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except BadRequestError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return EmergencyRequestResponse(
        data=_booking_to_schema(details),
        message="Emergency request created and notifications sent",
    )


@router.get("", response_model=EmergencyRequestListResponse)
def list_emergency_requests(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    service: EmergencyRequestService = Depends(get_emergency_service),
    _: User = Depends(get_current_active_user),
) -> EmergencyRequestListResponse:
    """Return open emergency requests, newest first."""

    items, pagination = service.list_emergency_requests(page=page, limit=limit)
    return EmergencyRequestListResponse(
        data=[_booking_to_schema(details) for details in items],
        pagination=PaginationRead.from_domain(pagination),
    )
