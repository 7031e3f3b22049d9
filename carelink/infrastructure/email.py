"""Outbound email delivery.

Two interchangeable senders implement :class:`EmailSender`: the SendGrid REST
transport and a logging fallback used when no credentials are configured.
:func:`build_email_sender` picks one from the settings. Neither sender raises;
transport problems are logged and reported through the boolean result.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from html import escape
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from carelink.config import Settings

logger = logging.getLogger(__name__)

_FOOTER = "This is an automated notification from the CareLink care system"


@dataclass(frozen=True)
class EmailMessage:
    """Rendered email ready to be handed to a sender."""

    subject: str
    html_body: str
    text_body: str


def _normalize_recipients(recipients: str | Iterable[str]) -> list[str]:
    if isinstance(recipients, str):
        recipients = [recipients]
    return [recipient.strip() for recipient in recipients if recipient and recipient.strip()]


class EmailSender:
    """Base class for email delivery strategies."""

    def send(
        self,
        recipients: str | Iterable[str],
        subject: str,
        html_body: str,
        text_body: str | None = None,
    ) -> bool:
        """Deliver the message to every recipient, returning ``True`` on full success."""

        raise NotImplementedError

    def send_message(self, recipients: str | Iterable[str], message: EmailMessage) -> bool:
        return self.send(recipients, message.subject, message.html_body, message.text_body)


class LoggingEmailSender(EmailSender):
    """Fallback sender that writes messages to the log instead of delivering them."""

    def send(
        self,
        recipients: str | Iterable[str],
        subject: str,
        html_body: str,
        text_body: str | None = None,
    ) -> bool:
        addresses = _normalize_recipients(recipients)
        logger.info(
            "Email transport not configured; logging message instead.\n"
            "To: %s\nSubject: %s\nBody:\n%s",
            ", ".join(addresses),
            subject,
            text_body or html_body,
        )
        return True


class SendGridEmailSender(EmailSender):
    """Deliver email through the SendGrid REST API."""

    def __init__(self, api_key: str, sender: str, *, client: SendGridAPIClient | None = None) -> None:
        self._sender = sender
        self._client = client or SendGridAPIClient(api_key)

    def send(
        self,
        recipients: str | Iterable[str],
        subject: str,
        html_body: str,
        text_body: str | None = None,
    ) -> bool:
        addresses = _normalize_recipients(recipients)
        if not addresses:
            logger.warning("Email '%s' has no recipients; nothing to send", subject)
            return False

        delivered = True
        for address in addresses:
            delivered = self._send_one(address, subject, html_body, text_body) and delivered
        return delivered

    def _send_one(
        self, recipient: str, subject: str, html_body: str, text_body: str | None
    ) -> bool:
        message = Mail(
            from_email=self._sender,
            to_emails=recipient,
            subject=subject,
            html_content=html_body,
            plain_text_content=text_body,
        )
        try:
            response = self._client.send(message)
        except Exception as exc:  # network and API failures must not reach callers
            _log_sendgrid_exception(exc, recipient)
            return False

        status_code = getattr(response, "status_code", None)
        if not isinstance(status_code, int) or not 200 <= status_code < 300:
            _log_unsuccessful_response(response, recipient)
            return False
        return True


def build_email_sender(settings: Settings) -> EmailSender:
    """Return the sender matching the configured transport."""

    if settings.email_enabled:
        return SendGridEmailSender(settings.sendgrid_api_key, settings.sendgrid_sender)
    logger.warning("SendGrid credentials not configured, using logging email fallback")
    return LoggingEmailSender()


def build_emergency_email(
    *,
    recipient_name: str,
    customer_name: str,
    customer_phone: str | None,
    address: str,
    notes: str | None,
    dashboard_url: str,
) -> EmailMessage:
    """Render the urgent alert sent to caregivers and admins."""

    subject = f"URGENT: Emergency Care Request from {customer_name}"

    details_html = [f"<p><strong>Name:</strong> {escape(customer_name)}</p>"]
    details_text = [f"- Name: {customer_name}"]
    if customer_phone:
        details_html.append(f"<p><strong>Phone:</strong> {escape(customer_phone)}</p>")
        details_text.append(f"- Phone: {customer_phone}")
    details_html.append(f"<p><strong>Address:</strong> {escape(address)}</p>")
    details_text.append(f"- Address: {address}")
    if notes:
        details_html.append(f"<p><strong>Notes:</strong> {escape(notes)}</p>")
        details_text.append(f"- Notes: {notes}")

    html_body = "".join(
        (
            "<!DOCTYPE html><html><head><meta charset=\"utf-8\"></head>",
            "<body style=\"font-family: Arial, sans-serif; line-height: 1.6; color: #333;\">",
            "<div style=\"max-width: 600px; margin: 0 auto; padding: 20px;\">",
            "<div style=\"background: #dc2626; color: white; padding: 20px; border-radius: 8px 8px 0 0;\">",
            "<h1>Emergency Care Request</h1></div>",
            "<div style=\"background: #f9fafb; padding: 20px; border: 1px solid #e5e7eb;\">",
            f"<p>Dear {escape(recipient_name)},</p>",
            "<p><strong>An emergency care request has been submitted and requires immediate attention.</strong></p>",
            "<div style=\"background: white; padding: 15px; margin: 15px 0; border-left: 4px solid #dc2626;\">",
            "<h3>Customer Details:</h3>",
            *details_html,
            "</div>",
            "<p>Please respond to this emergency request as soon as possible.</p>",
            f"<p style=\"text-align: center;\"><a href=\"{escape(dashboard_url, quote=True)}\">View Dashboard</a></p>",
            "</div>",
            f"<div style=\"text-align: center; padding: 20px; color: #6b7280; font-size: 12px;\"><p>{_FOOTER}</p></div>",
            "</div></body></html>",
        )
    )
    text_body = "\n".join(
        (
            "URGENT: Emergency Care Request",
            "",
            f"Dear {recipient_name},",
            "",
            "An emergency care request has been submitted and requires immediate attention.",
            "",
            "Customer Details:",
            *details_text,
            "",
            "Please respond to this emergency request as soon as possible.",
            "",
            f"Visit your dashboard: {dashboard_url}",
            "",
            "---",
            _FOOTER,
        )
    )
    return EmailMessage(subject=subject, html_body=html_body, text_body=text_body)


def build_notification_email(*, title: str, message: str, dashboard_url: str) -> EmailMessage:
    """Render the generic email that mirrors an in-app notification."""

    html_body = (
        f"<h2>{escape(title)}</h2>"
        f"<p>{escape(message)}</p>"
        f"<p><a href=\"{escape(dashboard_url, quote=True)}\">View Dashboard</a></p>"
    )
    text_body = f"{title}\n\n{message}\n\nView Dashboard: {dashboard_url}"
    return EmailMessage(subject=title, html_body=html_body, text_body=text_body)


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, "", b""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        messages: list[str] = []
        for item in parsed.get("errors") or []:
            if not isinstance(item, dict) or not item.get("message"):
                continue
            help_link = item.get("help")
            if help_link:
                messages.append(f"{item['message']} (help: {help_link})")
            else:
                messages.append(str(item["message"]))
        if messages:
            return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def _log_sendgrid_exception(exc: Exception, recipient: str) -> None:
    status_code = getattr(exc, "status_code", None)
    details = _extract_sendgrid_error_details(getattr(exc, "body", None))

    if status_code and details:
        logger.error(
            "SendGrid request for %s failed with status %s: %s", recipient, status_code, details
        )
    elif status_code:
        logger.error("SendGrid request for %s failed with status %s", recipient, status_code)
    elif details:
        logger.error("SendGrid request for %s failed: %s", recipient, details)
    else:
        logger.exception("Error sending email via SendGrid to %s: %s", recipient, exc)


def _log_unsuccessful_response(response: Any, recipient: str) -> None:
    status_code = getattr(response, "status_code", None)
    details = _extract_sendgrid_error_details(getattr(response, "body", None))

    if details:
        logger.error(
            "SendGrid responded with status %s for %s: %s", status_code, recipient, details
        )
    else:
        logger.error("SendGrid responded with status %s for %s", status_code, recipient)


__all__ = [
    "EmailMessage",
    "EmailSender",
    "LoggingEmailSender",
    "SendGridEmailSender",
    "build_email_sender",
    "build_emergency_email",
    "build_notification_email",
]
