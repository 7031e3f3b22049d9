"""Value objects describing the outcome of a notification dispatch."""

from __future__ import annotations

from dataclasses import dataclass, field

from .notification import Notification

CHANNEL_IN_APP = "in_app"
CHANNEL_EMAIL = "email"


@dataclass(frozen=True)
class DeliveryFailure:
    """A single recipient that could not be reached on ``channel``."""

    user_id: int
    channel: str
    reason: str


@dataclass
class DispatchReport:
    """Per-recipient results collected while dispatching a notification."""

    notifications: list[Notification] = field(default_factory=list)
    failures: list[DeliveryFailure] = field(default_factory=list)
    emails_sent: int = 0

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)

    def failures_for(self, channel: str) -> list[DeliveryFailure]:
        return [failure for failure in self.failures if failure.channel == channel]


__all__ = ["CHANNEL_EMAIL", "CHANNEL_IN_APP", "DeliveryFailure", "DispatchReport"]
