from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class OutgoingEmail:
    """
    A rendered email handed to a mailer.

    :ivar sender: ``From`` address.
    :ivar recipient: ``To`` address.
    :ivar subject: Subject line.
    :ivar html_body: Rendered HTML body.
    """

    sender: str
    recipient: str
    subject: str
    html_body: str


class Mailer(Protocol):
    """Port for delivering transactional email."""

    def send(self, *, sender: str, recipient: str, subject: str, html_body: str) -> None:
        """
        Deliver one message.

        :raises MailDeliveryError: When the transport rejects or fails.
        """
        ...


class InMemoryMailer(Mailer):
    """Collects messages in an outbox instead of delivering them."""

    def __init__(self) -> None:
        self.outbox: list[OutgoingEmail] = []
        self._lock = threading.Lock()

    def send(self, *, sender: str, recipient: str, subject: str, html_body: str) -> None:
        with self._lock:
            self.outbox.append(
                OutgoingEmail(
                    sender=sender, recipient=recipient, subject=subject, html_body=html_body
                )
            )

    def last_to(self, recipient: str) -> OutgoingEmail | None:
        """Return the most recent message sent to ``recipient``."""
        for message in reversed(self.outbox):
            if message.recipient == recipient:
                return message
        return None
