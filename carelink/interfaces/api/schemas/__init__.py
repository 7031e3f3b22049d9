from .auth import Token
from .common import MessageResponse, PaginationRead
from .emergency import (
    BookingRead,
    CaregiverSummaryRead,
    EmergencyRequestCreate,
    EmergencyRequestListResponse,
    EmergencyRequestResponse,
    UserSummaryRead,
)
from .notification import NotificationListResponse, NotificationRead, NotificationResponse

__all__ = [
    "BookingRead",
    "CaregiverSummaryRead",
    "EmergencyRequestCreate",
    "EmergencyRequestListResponse",
    "EmergencyRequestResponse",
    "MessageResponse",
    "NotificationListResponse",
    "NotificationRead",
    "NotificationResponse",
    "PaginationRead",
    "Token",
    "UserSummaryRead",
]
