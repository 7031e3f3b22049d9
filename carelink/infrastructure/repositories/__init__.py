"""Repository implementations for infrastructure layer."""

from .booking_repository import BookingRepository
from .caregiver_repository import CaregiverRepository
from .notification_repository import NotificationRepository
from .role_repository import RoleRepository
from .user_repository import UserRepository

__all__ = [
    "BookingRepository",
    "CaregiverRepository",
    "NotificationRepository",
    "RoleRepository",
    "UserRepository",
]
