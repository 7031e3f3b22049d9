"""Use cases for emergency care requests."""

from .service import DEFAULT_EMERGENCY_NOTES, EMERGENCY_TITLE, EmergencyRequestService
from .validators import ADDRESS_MIN_LENGTH, ensure_valid_address

__all__ = [
    "ADDRESS_MIN_LENGTH",
    "DEFAULT_EMERGENCY_NOTES",
    "EMERGENCY_TITLE",
    "EmergencyRequestService",
    "ensure_valid_address",
]
