"""
SMTP helpers used by the delivery worker to surface job alerts.
"""
from __future__ import annotations

import logging
import smtplib
from email.mime.text import MIMEText
from typing import Dict

from core import config

log = logging.getLogger(__name__)


def _effective_from(email_from: str | None, email_user: str | None, smtp_server: str) -> str:
    # Gmail rewrites or blocks a From that differs from the authenticated user.
    if "gmail" in (smtp_server or "").lower() and email_user:
        return email_user
    return email_from or email_user or "noreply@job-alerts.local"


def send_text_email(to_email: str, subject: str, body: str) -> None:
    if not (config.EMAIL_USER and config.EMAIL_PASSWORD):
        raise RuntimeError("Email credentials not configured. Set EMAIL_USER and EMAIL_PASSWORD.")

    msg = MIMEText(body)
    msg["Subject"] = subject
    msg["From"] = _effective_from(config.EMAIL_FROM, config.EMAIL_USER, config.SMTP_SERVER)
    msg["To"] = to_email

    with smtplib.SMTP(config.SMTP_SERVER, config.SMTP_PORT) as server:
        server.starttls()
        server.login(config.EMAIL_USER, config.EMAIL_PASSWORD)
        server.sendmail(msg["From"], [to_email], msg.as_string())
    log.info("Email sent", extra={"to": to_email, "from": msg["From"]})


def deliver_alert_email(delivery: Dict) -> None:
    """Notification handler: surface one queued alert as an email."""
    to_email = (delivery.get("email") or "").strip()
    if not to_email or "@" not in to_email:
        raise RuntimeError(f"No email address for user {delivery.get('user_id')}")

    body = f"{delivery.get('body') or ''}\n\nJob ID: {delivery.get('job_id')}\n"
    send_text_email(to_email, delivery.get("title") or "New job nearby", body)
