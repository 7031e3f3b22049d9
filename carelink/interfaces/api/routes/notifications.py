"""Endpoints and websocket handler for user notifications."""

from __future__ import annotations

import logging

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sqlalchemy.orm import Session

from carelink.application.use_cases.notifications import (
    delete_notification as delete_notification_uc,
    list_notifications as list_notifications_uc,
    mark_all_notifications_read as mark_all_notifications_read_uc,
    mark_notification_read as mark_notification_read_uc,
)
from carelink.domain.entities import Notification, User
from carelink.domain.exceptions import NotFoundError
from carelink.infrastructure.database import SessionLocal, get_db
from carelink.infrastructure.notifications import notification_manager, serialize_notification
from carelink.infrastructure.repositories import NotificationRepository
from carelink.interfaces.api.dependencies import get_current_active_user, resolve_current_user
from carelink.interfaces.api.schemas import (
    MessageResponse,
    NotificationListResponse,
    NotificationRead,
    NotificationResponse,
    PaginationRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead.model_validate(notification)


@router.get("", response_model=NotificationListResponse)
def list_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    unread_only: bool = Query(False, alias="unreadOnly"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationListResponse:
    """Return the authenticated user's notifications, newest first."""

    result = list_notifications_uc(
        db, current_user.id, page=page, limit=limit, unread_only=unread_only
    )
    return NotificationListResponse(
        data=[_notification_to_schema(notification) for notification in result.items],
        pagination=PaginationRead.from_domain(result.pagination),
        unread_count=result.unread_count,
    )


@router.patch("/read-all", response_model=MessageResponse)
def mark_all_notifications_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    """Mark every unread notification of the authenticated user as read."""

    updated = mark_all_notifications_read_uc(db, current_user.id)
    logger.debug("Marked %d notifications as read for user %s", updated, current_user.id)
    return MessageResponse(message="All notifications marked as read")


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationResponse:
    """Mark one of the authenticated user's notifications as read."""

    try:
        notification = mark_notification_read_uc(db, notification_id, current_user.id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return NotificationResponse(data=_notification_to_schema(notification))


@router.delete("/{notification_id}", response_model=MessageResponse)
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    """Delete one of the authenticated user's notifications."""

    try:
        delete_notification_uc(db, notification_id, current_user.id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return MessageResponse(message="Notification deleted")


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams notifications to the authenticated user."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=1008)
        return

    session = SessionLocal()
    try:
        user = resolve_current_user(token, session)
        if not user.is_active:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
        pending_notifications = NotificationRepository(session).list_unread_for_user(user.id)
    except HTTPException:
        await websocket.close(code=1008)
        return
    finally:
        session.close()

    await notification_manager.connect(user.id, websocket)
    try:
        if pending_notifications:
            await websocket.send_json(
                {"type": "init", "data": [serialize_notification(n) for n in pending_notifications]}
            )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                raw_ids = message.get("ids")
                ids = [value for value in raw_ids if isinstance(value, int)] if isinstance(raw_ids, list) else []
                if ids:
                    ack_session = SessionLocal()
                    try:
                        NotificationRepository(ack_session).mark_many_as_read(ids, user_id=user.id)
                    finally:
                        ack_session.close()
    except WebSocketDisconnect:
        notification_manager.disconnect(user.id, websocket)
    except Exception:
        notification_manager.disconnect(user.id, websocket)
        logger.exception("Notification websocket for user %s failed", user.id)
        raise
