"""ORM models used by the application infrastructure."""

from .role import RoleModel
from .user import UserModel
from .caregiver_profile import CaregiverProfileModel
from .booking import BookingModel
from .notification import NotificationModel

__all__ = [
    "BookingModel",
    "CaregiverProfileModel",
    "NotificationModel",
    "RoleModel",
    "UserModel",
]
