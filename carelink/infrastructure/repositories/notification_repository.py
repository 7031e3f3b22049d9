"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy.orm import Session

from carelink.domain.entities import (
    NOTIFICATION_STATUS_READ,
    NOTIFICATION_STATUS_UNREAD,
    Notification,
)
from carelink.infrastructure.models import NotificationModel
from carelink.utils import ensure_utc, storage_now


class NotificationRepository:
    """Store of per-user notifications.

    Every read and write is scoped to the owning ``user_id`` so one user can
    never observe or alter another user's notifications.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel(
            user_id=notification.user_id,
            type=notification.type,
            title=notification.title,
            message=notification.message,
            status=NOTIFICATION_STATUS_UNREAD,
            metadata_=dict(notification.metadata or {}),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_for_user(
        self,
        user_id: int,
        *,
        offset: int = 0,
        limit: int | None = 50,
        unread_only: bool = False,
    ) -> Sequence[Notification]:
        query = self._owned_query(user_id, unread_only=unread_only).order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def list_unread_for_user(
        self, user_id: int, *, limit: int | None = 50
    ) -> Sequence[Notification]:
        return self.list_for_user(user_id, limit=limit, unread_only=True)

    def count_for_user(self, user_id: int, *, unread_only: bool = False) -> int:
        return self._owned_query(user_id, unread_only=unread_only).count()

    def count_unread(self, user_id: int) -> int:
        return self.count_for_user(user_id, unread_only=True)

    def mark_as_read(self, notification_id: int, *, user_id: int) -> Notification | None:
        """Mark one owned notification as read, returning ``None`` when not owned."""

        model = self._get_owned_model(notification_id, user_id=user_id)
        if model is None:
            return None
        if model.status != NOTIFICATION_STATUS_READ:
            model.status = NOTIFICATION_STATUS_READ
            model.updated_at = storage_now()
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def mark_many_as_read(self, notification_ids: Iterable[int], *, user_id: int) -> int:
        ids = [notification_id for notification_id in notification_ids if notification_id is not None]
        if not ids:
            return 0
        updated = (
            self._owned_query(user_id, unread_only=True)
            .filter(NotificationModel.id.in_(ids))
            .update(
                {
                    NotificationModel.status: NOTIFICATION_STATUS_READ,
                    NotificationModel.updated_at: storage_now(),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated

    def mark_all_as_read(self, user_id: int) -> int:
        updated = self._owned_query(user_id, unread_only=True).update(
            {
                NotificationModel.status: NOTIFICATION_STATUS_READ,
                NotificationModel.updated_at: storage_now(),
            },
            synchronize_session=False,
        )
        self.session.commit()
        return updated

    def delete(self, notification_id: int, *, user_id: int) -> bool:
        deleted = (
            self._owned_query(user_id)
            .filter(NotificationModel.id == notification_id)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted > 0

    def _owned_query(self, user_id: int, *, unread_only: bool = False):
        query = self.session.query(NotificationModel).filter(
            NotificationModel.user_id == user_id
        )
        if unread_only:
            query = query.filter(NotificationModel.status == NOTIFICATION_STATUS_UNREAD)
        return query

    def _get_owned_model(self, notification_id: int, *, user_id: int) -> NotificationModel | None:
        return (
            self._owned_query(user_id)
            .filter(NotificationModel.id == notification_id)
            .first()
        )

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=model.type,
            title=model.title,
            message=model.message,
            status=model.status,
            metadata=dict(model.metadata_ or {}),
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )


__all__ = ["NotificationRepository"]
