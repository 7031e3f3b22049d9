"""Public helpers for storing, delivering and managing notifications."""

from .dispatcher import NotificationDispatcher, unique_recipient_ids
from .manage import (
    delete_notification,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)

__all__ = [
    "NotificationDispatcher",
    "delete_notification",
    "list_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
    "unique_recipient_ids",
]
