"""Announcement emails delivered through SendGrid."""

from __future__ import annotations

import html
import json
import logging
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from storefront.config import get_settings

logger = logging.getLogger(__name__)


def _describe_sendgrid_body(body: Any) -> str | None:
    """Return the error messages contained in a SendGrid response body."""

    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            body = json.loads(body)
        except json.JSONDecodeError:
            return body
    if not isinstance(body, dict):
        return None

    messages = [
        str(item["message"])
        for item in body.get("errors") or []
        if isinstance(item, dict) and item.get("message")
    ]
    if messages:
        return "; ".join(messages)
    return json.dumps(body)


def _log_sendgrid_failure(source: Any) -> None:
    status_code = getattr(source, "status_code", None)
    details = _describe_sendgrid_body(getattr(source, "body", None))
    if status_code and details:
        logger.error("SendGrid request failed with status %s: %s", status_code, details)
    elif status_code:
        logger.error("SendGrid request failed with status %s", status_code)
    elif details:
        logger.error("SendGrid request failed: %s", details)
    else:
        logger.error("SendGrid request failed: %r", source)


def send_email(subject: str, html_content: str, recipient: str) -> bool:
    """Send an email using the configured SendGrid credentials."""

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid configuration incomplete; skipping email delivery")
        return False

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        response = SendGridAPIClient(settings.sendgrid_api_key).send(message)
    except Exception as exc:  # pragma: no cover - network failures depend on environment
        _log_sendgrid_failure(exc)
        return False

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        _log_sendgrid_failure(response)
        return False
    return True


def send_announcement_email(email: str, title: str, message: str) -> bool:
    """Email an administrator announcement to a single user."""

    html_content = "".join(
        (
            "<p>Hola,</p>",
            f"<h2>{html.escape(title)}</h2>",
            f"<p>{html.escape(message)}</p>",
            "<p>También puedes verla en la sección de notificaciones de tu perfil.</p>",
        )
    )
    return send_email(title, html_content, email)


__all__ = ["send_announcement_email", "send_email"]
