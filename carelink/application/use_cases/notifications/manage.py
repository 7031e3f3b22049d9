"""Use cases letting a user read and manage their own notifications."""

from __future__ import annotations

from sqlalchemy.orm import Session

from carelink.domain.entities import Notification, NotificationPage, Pagination
from carelink.domain.exceptions import NotFoundError
from carelink.infrastructure.repositories import NotificationRepository

_NOT_FOUND_MESSAGE = "Notification not found"


def list_notifications(
    session: Session,
    user_id: int,
    *,
    page: int = 1,
    limit: int = 50,
    unread_only: bool = False,
) -> NotificationPage:
    """Return one page of the user's notifications, newest first.

    ``unread_count`` always reflects every unread notification of the user,
    independent of ``unread_only`` and of the page window.
    """

    repository = NotificationRepository(session)
    total = repository.count_for_user(user_id, unread_only=unread_only)
    pagination = Pagination(page=page, limit=limit, total=total)
    items = repository.list_for_user(
        user_id,
        offset=pagination.offset,
        limit=limit,
        unread_only=unread_only,
    )
    return NotificationPage(
        items=list(items),
        pagination=pagination,
        unread_count=repository.count_unread(user_id),
    )


def mark_notification_read(session: Session, notification_id: int, user_id: int) -> Notification:
    """Mark a notification owned by ``user_id`` as read."""

    notification = NotificationRepository(session).mark_as_read(
        notification_id, user_id=user_id
    )
    if notification is None:
        raise NotFoundError(_NOT_FOUND_MESSAGE)
    return notification


def mark_all_notifications_read(session: Session, user_id: int) -> int:
    """Mark every unread notification of ``user_id`` as read; returns how many changed."""

    return NotificationRepository(session).mark_all_as_read(user_id)


def delete_notification(session: Session, notification_id: int, user_id: int) -> None:
    """Delete a notification owned by ``user_id``."""

    if not NotificationRepository(session).delete(notification_id, user_id=user_id):
        raise NotFoundError(_NOT_FOUND_MESSAGE)
