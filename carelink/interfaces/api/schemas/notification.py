"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from .common import CamelModel, PaginationRead


class NotificationRead(CamelModel):
    """Representation of a notification delivered to the client."""

    id: int
    user_id: int
    type: str
    title: str
    message: str
    status: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class NotificationResponse(CamelModel):
    success: bool = True
    data: NotificationRead


class NotificationListResponse(CamelModel):
    success: bool = True
    data: list[NotificationRead]
    pagination: PaginationRead
    unread_count: int


__all__ = ["NotificationListResponse", "NotificationRead", "NotificationResponse"]
