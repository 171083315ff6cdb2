"""SMTP and logging adapters for the :class:`Mailer` port."""

from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage

from authcore.services._shared.errors import MailDeliveryError
from authcore.services._shared.ports import Mailer

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SmtpMailer(Mailer):
    """
    Deliver HTML email through an SMTP relay.

    A new connection is opened per message; pooling belongs to the relay.

    :param host: Relay host.
    :param port: Relay port.
    :param username: Optional login user.
    :param password: Optional login password.
    :param use_tls: Issue ``STARTTLS`` before authenticating.
    :param timeout: Socket timeout in seconds.
    """

    host: str
    port: int = 587
    username: str | None = None
    password: str | None = None
    use_tls: bool = True
    timeout: float = 10.0

    def send(self, *, sender: str, recipient: str, subject: str, html_body: str) -> None:
        message = EmailMessage()
        message["From"] = sender
        message["To"] = recipient
        message["Subject"] = subject
        message.set_content("This message requires an HTML-capable email client.")
        message.add_alternative(html_body, subtype="html")

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as conn:
                if self.use_tls:
                    conn.starttls()
                if self.username and self.password:
                    conn.login(self.username, self.password)
                conn.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise MailDeliveryError(f"SMTP delivery failed: {exc}") from exc


class LoggingMailer(Mailer):
    """Development mailer: logs the subject instead of delivering anything."""

    def send(self, *, sender: str, recipient: str, subject: str, html_body: str) -> None:
        log.info("mail.suppressed subject=%s bytes=%d", subject, len(html_body))
