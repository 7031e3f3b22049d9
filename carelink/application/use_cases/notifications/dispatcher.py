"""Fan a notification out to many users over the in-app and email channels."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from carelink.domain.entities import (
    CHANNEL_EMAIL,
    CHANNEL_IN_APP,
    NOTIFICATION_MESSAGE_MAX_LENGTH,
    NOTIFICATION_TITLE_MAX_LENGTH,
    NOTIFICATION_TYPE_EMERGENCY,
    NOTIFICATION_TYPES,
    DeliveryFailure,
    DispatchReport,
    Notification,
    User,
)
from carelink.infrastructure.email import (
    EmailMessage,
    EmailSender,
    build_emergency_email,
    build_notification_email,
)
from carelink.infrastructure.notifications import NotificationPublisher
from carelink.infrastructure.repositories import NotificationRepository, UserRepository

logger = logging.getLogger(__name__)


def unique_recipient_ids(user_ids: Iterable[int | None]) -> list[int]:
    """Return ``user_ids`` without duplicates or empty values, keeping first-seen order."""

    unique: list[int] = []
    seen: set[int] = set()
    for user_id in user_ids:
        if not user_id or user_id in seen:
            continue
        seen.add(user_id)
        unique.append(user_id)
    return unique


def _clip(value: str, limit: int) -> str:
    if len(value) <= limit:
        return value
    return value[: limit - 3].rstrip() + "..."


class NotificationDispatcher:
    """Persist one notification per recipient and optionally email each of them.

    Storage and email are separate failure domains: a recipient whose row
    could not be written is still emailed, and an email failure never
    touches the stored rows. Problems are collected in the returned
    :class:`DispatchReport` and logged instead of being raised.
    """

    def __init__(
        self,
        session: Session,
        email_sender: EmailSender,
        *,
        dashboard_url: str,
        email_timeout: float = 10.0,
        publisher: NotificationPublisher | None = None,
        store: NotificationRepository | None = None,
        users: UserRepository | None = None,
    ) -> None:
        self._session = session
        self._email_sender = email_sender
        self._dashboard_url = dashboard_url
        self._email_timeout = email_timeout
        self._publisher = publisher
        self._store = store or NotificationRepository(session)
        self._users = users or UserRepository(session)

    def dispatch(
        self,
        recipient_ids: Iterable[int],
        *,
        notification_type: str,
        title: str,
        message: str,
        metadata: Mapping[str, Any] | None = None,
        send_email: bool = False,
    ) -> DispatchReport:
        if notification_type not in NOTIFICATION_TYPES:
            raise ValueError(f"Unknown notification type '{notification_type}'")

        report = DispatchReport()
        recipients = unique_recipient_ids(recipient_ids)
        if not recipients:
            return report

        title = _clip(title, NOTIFICATION_TITLE_MAX_LENGTH)
        message = _clip(message, NOTIFICATION_MESSAGE_MAX_LENGTH)
        payload = dict(metadata or {})

        for user_id in recipients:
            self._persist(
                report,
                user_id,
                notification_type=notification_type,
                title=title,
                message=message,
                metadata=payload,
            )

        if send_email:
            self._send_emails(
                report,
                recipients,
                notification_type=notification_type,
                title=title,
                message=message,
                metadata=payload,
            )

        self._log_summary(report, recipients, notification_type)
        return report

    def _persist(
        self,
        report: DispatchReport,
        user_id: int,
        *,
        notification_type: str,
        title: str,
        message: str,
        metadata: dict[str, Any],
    ) -> None:
        try:
            saved = self._store.create(
                Notification(
                    id=None,
                    user_id=user_id,
                    type=notification_type,
                    title=title,
                    message=message,
                    metadata=dict(metadata),
                )
            )
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.error("Could not store %s notification for user %s: %s", notification_type, user_id, exc)
            report.failures.append(DeliveryFailure(user_id, CHANNEL_IN_APP, str(exc)))
            return

        report.notifications.append(saved)
        if self._publisher is None:
            return
        try:
            self._publisher.publish(saved)
        except Exception:  # realtime push is best effort
            logger.warning("Realtime push failed for notification %s", saved.id, exc_info=True)

    def _send_emails(
        self,
        report: DispatchReport,
        recipients: list[int],
        *,
        notification_type: str,
        title: str,
        message: str,
        metadata: dict[str, Any],
    ) -> None:
        try:
            directory = self._users.get_map_by_ids(recipients)
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.error("Could not resolve email recipients: %s", exc)
            report.failures.extend(
                DeliveryFailure(user_id, CHANNEL_EMAIL, "recipient lookup failed")
                for user_id in recipients
            )
            return

        jobs: list[tuple[User, EmailMessage]] = []
        for user_id in recipients:
            user = directory.get(user_id)
            if user is None or not user.email:
                report.failures.append(DeliveryFailure(user_id, CHANNEL_EMAIL, "no email address"))
                continue
            rendered = self._render(
                user,
                notification_type=notification_type,
                title=title,
                message=message,
                metadata=metadata,
            )
            jobs.append((user, rendered))

        if not jobs:
            return

        # One worker per recipient; every send starts immediately.
        executor = ThreadPoolExecutor(max_workers=len(jobs), thread_name_prefix="email")
        try:
            futures: dict[Future[bool], User] = {
                executor.submit(self._email_sender.send_message, user.email, rendered): user
                for user, rendered in jobs
            }
            done, pending = wait(futures, timeout=self._email_timeout)
            for future in pending:
                future.cancel()
                user = futures[future]
                logger.warning("Email to user %s timed out after %.1fs", user.id, self._email_timeout)
                report.failures.append(DeliveryFailure(user.id, CHANNEL_EMAIL, "timed out"))
            for future in done:
                user = futures[future]
                try:
                    delivered = future.result()
                except Exception as exc:  # a misbehaving sender only loses its own recipient
                    logger.exception("Email sender raised for user %s", user.id)
                    reason = str(exc) or exc.__class__.__name__
                    report.failures.append(DeliveryFailure(user.id, CHANNEL_EMAIL, reason))
                    continue
                if delivered:
                    report.emails_sent += 1
                else:
                    report.failures.append(DeliveryFailure(user.id, CHANNEL_EMAIL, "delivery failed"))
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def _render(
        self,
        user: User,
        *,
        notification_type: str,
        title: str,
        message: str,
        metadata: dict[str, Any],
    ) -> EmailMessage:
        if notification_type == NOTIFICATION_TYPE_EMERGENCY:
            return build_emergency_email(
                recipient_name=user.name,
                customer_name=metadata.get("customerName") or "Customer",
                customer_phone=metadata.get("customerPhone"),
                address=metadata.get("address") or "",
                notes=metadata.get("notes"),
                dashboard_url=self._dashboard_url,
            )
        return build_notification_email(title=title, message=message, dashboard_url=self._dashboard_url)

    @staticmethod
    def _log_summary(report: DispatchReport, recipients: list[int], notification_type: str) -> None:
        if not report.has_failures:
            logger.info(
                "Dispatched %s notification to %d recipients (%d emails sent)",
                notification_type,
                len(recipients),
                report.emails_sent,
            )
            return
        logger.warning(
            "Dispatched %s notification to %d of %d recipients; %d in-app and %d email failures",
            notification_type,
            len(report.notifications),
            len(recipients),
            len(report.failures_for(CHANNEL_IN_APP)),
            len(report.failures_for(CHANNEL_EMAIL)),
        )


__all__ = ["NotificationDispatcher", "unique_recipient_ids"]
