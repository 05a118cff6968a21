"""
Delivery transports for one-time codes.

SMTP is used when fully configured. Outside production an unconfigured
transport falls back to logging the code so local logins keep working;
in production it refuses to deliver.
"""

import logging
import smtplib
import ssl
from email.mime.text import MIMEText
from typing import Optional

from shared.config import Settings, get_settings
from shared.redaction import redact_email

from .exceptions import DeliveryUnavailableError
from .interfaces import IOtpTransport

logger = logging.getLogger(__name__)

SMTP_TIMEOUT_SECONDS = 30


def render_code_message(code: str, ttl_minutes: int) -> tuple[str, str]:
    """Subject and plain-text body of the code email."""
    subject = "Your SprintDesk login code"
    body = f"Your SprintDesk code is {code}. It expires in {ttl_minutes} minutes."
    return subject, body


class SmtpOtpTransport(IOtpTransport):
    """Send codes through an SMTP relay (STARTTLS, or implicit TLS on 465)."""

    def __init__(
        self,
        *,
        host: str,
        port: int,
        user: str,
        password: str,
        from_email: str,
    ) -> None:
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.from_email = from_email

    def send_code(self, email: str, code: str, ttl_minutes: int) -> None:
        subject, body = render_code_message(code, ttl_minutes)
        msg = MIMEText(body, "plain")
        msg["Subject"] = subject
        msg["From"] = self.from_email
        msg["To"] = email

        context = ssl.create_default_context()
        try:
            if self.port == 465:
                with smtplib.SMTP_SSL(
                    self.host, self.port, context=context, timeout=SMTP_TIMEOUT_SECONDS
                ) as server:
                    server.login(self.user, self.password)
                    server.sendmail(self.from_email, email, msg.as_string())
            else:
                with smtplib.SMTP(self.host, self.port, timeout=SMTP_TIMEOUT_SECONDS) as server:
                    server.starttls(context=context)
                    server.login(self.user, self.password)
                    server.sendmail(self.from_email, email, msg.as_string())
        except (smtplib.SMTPException, ssl.SSLError, OSError) as e:
            logger.error(
                "Failed to send login code to %s via %s:%s: %s",
                redact_email(email),
                self.host,
                self.port,
                e,
            )
            raise DeliveryUnavailableError() from e

        logger.info("Sent login code to %s", redact_email(email))


class LoggingOtpTransport(IOtpTransport):
    """Development transport: writes the code to the log."""

    def send_code(self, email: str, code: str, ttl_minutes: int) -> None:
        logger.warning("[DEV OTP] %s -> %s (expires in %s min)", email, code, ttl_minutes)


class UnavailableOtpTransport(IOtpTransport):
    """Production transport used when SMTP is not configured."""

    def send_code(self, email: str, code: str, ttl_minutes: int) -> None:
        logger.error("SMTP not configured; cannot send login code to %s", redact_email(email))
        raise DeliveryUnavailableError("SMTP not configured")


def build_otp_transport(settings: Optional[Settings] = None) -> IOtpTransport:
    """Pick the transport matching the current configuration."""
    settings = settings or get_settings()
    if settings.smtp_enabled:
        return SmtpOtpTransport(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.smtp_user,
            password=settings.smtp_password,
            from_email=settings.smtp_from,
        )
    if settings.is_production:
        return UnavailableOtpTransport()
    return LoggingOtpTransport()
