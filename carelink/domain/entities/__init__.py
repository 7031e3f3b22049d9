"""Domain entities exposed by the application."""

from .booking import (
    BOOKING_ACTIVE_STATUSES,
    BOOKING_STATUS_CANCELLED,
    BOOKING_STATUS_COMPLETED,
    BOOKING_STATUS_CONFIRMED,
    BOOKING_STATUS_IN_PROGRESS,
    BOOKING_STATUS_REQUESTED,
    EMERGENCY_MARKER,
    Booking,
    BookingDetails,
)
from .caregiver_profile import CaregiverProfile, CaregiverSummary
from .dispatch import CHANNEL_EMAIL, CHANNEL_IN_APP, DeliveryFailure, DispatchReport
from .emergency import BroadcastTarget, CaregiverTarget, EmergencyTarget, target_for
from .notification import (
    NOTIFICATION_MESSAGE_MAX_LENGTH,
    NOTIFICATION_STATUS_READ,
    NOTIFICATION_STATUS_UNREAD,
    NOTIFICATION_TITLE_MAX_LENGTH,
    NOTIFICATION_TYPES,
    NOTIFICATION_TYPE_ALERT,
    NOTIFICATION_TYPE_BOOKING,
    NOTIFICATION_TYPE_EMERGENCY,
    NOTIFICATION_TYPE_SYSTEM,
    Notification,
    NotificationPage,
    Pagination,
)
from .role import ROLE_ADMIN, ROLE_CAREGIVER, ROLE_CUSTOMER, Role
from .user import User, UserSummary

__all__ = [
    "BOOKING_ACTIVE_STATUSES",
    "BOOKING_STATUS_CANCELLED",
    "BOOKING_STATUS_COMPLETED",
    "BOOKING_STATUS_CONFIRMED",
    "BOOKING_STATUS_IN_PROGRESS",
    "BOOKING_STATUS_REQUESTED",
    "Booking",
    "BookingDetails",
    "BroadcastTarget",
    "CHANNEL_EMAIL",
    "CHANNEL_IN_APP",
    "CaregiverProfile",
    "CaregiverSummary",
    "CaregiverTarget",
    "DeliveryFailure",
    "DispatchReport",
    "EMERGENCY_MARKER",
    "EmergencyTarget",
    "NOTIFICATION_MESSAGE_MAX_LENGTH",
    "NOTIFICATION_STATUS_READ",
    "NOTIFICATION_STATUS_UNREAD",
    "NOTIFICATION_TITLE_MAX_LENGTH",
    "NOTIFICATION_TYPES",
    "NOTIFICATION_TYPE_ALERT",
    "NOTIFICATION_TYPE_BOOKING",
    "NOTIFICATION_TYPE_EMERGENCY",
    "NOTIFICATION_TYPE_SYSTEM",
    "Notification",
    "NotificationPage",
    "Pagination",
    "ROLE_ADMIN",
    "ROLE_CAREGIVER",
    "ROLE_CUSTOMER",
    "Role",
    "User",
    "UserSummary",
    "target_for",
]
