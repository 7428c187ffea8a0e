"""Bundled MailSender implementations."""

import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from comment_guard.core.exceptions import NotificationDeliveryError
from comment_guard.core.interfaces import MailSender
from comment_guard.foundation.config import SmtpConfig

logger = logging.getLogger(__name__)


class SmtpMailSender(MailSender):
    """Sends plain-text mail through an SMTP relay."""

    def __init__(self, config: Optional[SmtpConfig] = None):
        self.config = config or SmtpConfig()

    @property
    def transport_name(self) -> str:
        return f"smtp://{self.config.host}:{self.config.port}"

    def build_message(self, recipient: str, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.config.from_address or self.config.username or recipient
        msg["To"] = recipient
        msg.set_content(body)
        return msg

    def send(self, recipient: str, subject: str, body: str) -> bool:
        msg = self.build_message(recipient, subject, body)

        try:
            with smtplib.SMTP(self.config.host, self.config.port, timeout=self.config.timeout) as server:
                if self.config.use_tls:
                    server.starttls()
                if self.config.username:
                    server.login(self.config.username, self.config.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationDeliveryError(
                f"SMTP delivery failed: {e}",
                recipient=recipient,
                transport=self.transport_name
            ) from e

        logger.info(f"Notification sent to {recipient} via {self.transport_name}")
        return True


class LoggingMailSender(MailSender):
    """Dry-run sender: writes the notification to the log instead of mailing it."""

    def __init__(self, level: int = logging.INFO):
        self.level = level

    def send(self, recipient: str, subject: str, body: str) -> bool:
        logger.log(self.level, f"Notification for {recipient}: {subject}\n{body}")
        return True
