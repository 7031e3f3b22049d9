"""Targets an emergency request can be addressed to."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class BroadcastTarget:
    """No caregiver chosen: the request goes out to the whole audience."""


@dataclass(frozen=True)
class CaregiverTarget:
    """The customer picked a specific caregiver profile."""

    caregiver_id: int


EmergencyTarget = Union[BroadcastTarget, CaregiverTarget]


def target_for(caregiver_id: int | None) -> EmergencyTarget:
    """Return the target matching an optional caregiver identifier."""

    if caregiver_id is None:
        return BroadcastTarget()
    return CaregiverTarget(caregiver_id=caregiver_id)


__all__ = ["BroadcastTarget", "CaregiverTarget", "EmergencyTarget", "target_for"]
