"""Domain entity representing a caregiver's professional profile."""

from dataclasses import dataclass
from datetime import datetime

from .user import UserSummary


@dataclass
class CaregiverProfile:
    """Caregiver details linked to a user account."""

    id: int | None
    user_id: int
    verified: bool
    hourly_rate_cents: int
    bio: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class CaregiverSummary:
    """Caregiver profile joined with the owning user's contact details."""

    id: int
    verified: bool
    hourly_rate_cents: int
    user: UserSummary


__all__ = ["CaregiverProfile", "CaregiverSummary"]
