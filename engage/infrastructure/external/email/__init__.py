"""Email delivery: SMTP sender, log-only sender and message templates."""

from engage.infrastructure.external.email.smtp_sender import (
    LogOnlyEmailSender,
    SmtpEmailSender,
    build_email_sender,
)

__all__ = ["LogOnlyEmailSender", "SmtpEmailSender", "build_email_sender"]
