"""Email senders: SMTP (smtplib in a worker thread) and a log-only fallback."""

from __future__ import annotations

import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr

from engage.core.config import Settings
from engage.domain.exceptions import DeliveryError
from engage.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class SmtpEmailSender:
    """IEmailSender over SMTP. Each send opens one connection."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        from_email: str = "no-reply@engage.local",
        from_name: str = "EY Engage",
        timeout_seconds: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.from_email = from_email
        self.from_name = from_name
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> SmtpEmailSender:
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=(
                settings.smtp_password.get_secret_value() if settings.smtp_password else ""
            ),
            use_tls=settings.smtp_use_tls,
            from_email=settings.smtp_from_email,
            from_name=settings.smtp_from_name,
            timeout_seconds=settings.notification_timeout_seconds,
        )

    def _send_sync(self, to: str, subject: str, html_body: str) -> None:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = formataddr((self.from_name, self.from_email))
        msg["To"] = to
        msg.attach(MIMEText(html_body, "html", "utf-8"))

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout_seconds) as server:
            if self.use_tls:
                server.starttls()
            if self.username:
                server.login(self.username, self.password)
            server.sendmail(self.from_email, [to], msg.as_string())

    async def send(self, to: str, subject: str, html_body: str) -> None:
        try:
            await asyncio.to_thread(self._send_sync, to, subject, html_body)
        except (smtplib.SMTPException, OSError) as e:
            raise DeliveryError("email", str(e)) from e
        logger.info("Email sent (subject=%r)", subject[:80])


class LogOnlyEmailSender:
    """IEmailSender that logs instead of sending. Used when SMTP_HOST is unset."""

    async def send(self, to: str, subject: str, html_body: str) -> None:
        logger.info("Email: would send to 1 recipient (subject=%r)", (subject or "")[:80])
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Email recipient: %s", to)
        logger.debug("Email body (first 500 chars): %s", (html_body or "")[:500])


def build_email_sender(settings: Settings) -> SmtpEmailSender | LogOnlyEmailSender:
    """SMTP sender when configured, otherwise the log-only sender."""
    if settings.smtp_configured:
        return SmtpEmailSender.from_settings(settings)
    logger.info("SMTP_HOST not set; emails will be logged, not sent")
    return LogOnlyEmailSender()
