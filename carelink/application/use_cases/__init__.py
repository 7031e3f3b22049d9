"""Aggregate application use cases."""

from .emergency import EmergencyRequestService
from .notifications import NotificationDispatcher
from .users import authenticate_user, create_user

__all__ = [
    "EmergencyRequestService",
    "NotificationDispatcher",
    "authenticate_user",
    "create_user",
]
