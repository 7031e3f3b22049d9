"""Push freshly stored notifications to websocket subscribers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from anyio import from_thread

from carelink.domain.entities import Notification

from .manager import NotificationConnectionManager, notification_manager

logger = logging.getLogger(__name__)


class NotificationPublisher:
    """Serialize notifications and schedule their delivery."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager
        self._tasks: set[asyncio.Task[None]] = set()

    def publish(self, notification: Notification) -> None:
        """Schedule ``notification`` to be delivered to its owner, if connected."""

        if not self._manager.is_connected(notification.user_id):
            return

        message = {"type": "notification", "data": serialize_notification(notification)}
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Sync route handlers run in AnyIO worker threads.
            try:
                from_thread.run(self._manager.send_to_user, notification.user_id, message)
            except RuntimeError:
                logger.debug(
                    "No event loop available to push notification %s", notification.id
                )
        else:
            task = loop.create_task(self._manager.send_to_user(notification.user_id, message))
            self._tasks.add(task)
            task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Realtime push failed: %s", exc, exc_info=exc)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the JSON representation shared by the websocket and REST payloads."""

    return {
        "id": notification.id,
        "userId": notification.user_id,
        "type": notification.type,
        "title": notification.title,
        "message": notification.message,
        "status": notification.status,
        "metadata": notification.metadata or {},
        "createdAt": notification.created_at.isoformat() if notification.created_at else None,
        "updatedAt": notification.updated_at.isoformat() if notification.updated_at else None,
    }


notification_publisher = NotificationPublisher(notification_manager)


__all__ = ["NotificationPublisher", "notification_publisher", "serialize_notification"]
