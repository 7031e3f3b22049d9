"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

NOTIFICATION_TYPE_EMERGENCY = "emergency"
NOTIFICATION_TYPE_BOOKING = "booking"
NOTIFICATION_TYPE_SYSTEM = "system"
NOTIFICATION_TYPE_ALERT = "alert"
NOTIFICATION_TYPES = frozenset(
    {
        NOTIFICATION_TYPE_EMERGENCY,
        NOTIFICATION_TYPE_BOOKING,
        NOTIFICATION_TYPE_SYSTEM,
        NOTIFICATION_TYPE_ALERT,
    }
)

NOTIFICATION_STATUS_UNREAD = "unread"
NOTIFICATION_STATUS_READ = "read"

NOTIFICATION_TITLE_MAX_LENGTH = 200
NOTIFICATION_MESSAGE_MAX_LENGTH = 1000


@dataclass
class Notification:
    """Information message delivered to a specific user."""

    id: int | None
    user_id: int
    type: str
    title: str
    message: str
    status: str = NOTIFICATION_STATUS_UNREAD
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class Pagination:
    """Paging window over a result set."""

    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return -(-self.total // self.limit)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class NotificationPage:
    """One page of a user's notifications plus their total unread count."""

    items: list[Notification]
    pagination: Pagination
    unread_count: int


__all__ = [
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
]
