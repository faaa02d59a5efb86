"""
Outgoing email delivery through the Resend HTTP API.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Protocol

import requests

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"
REQUEST_TIMEOUT = 30  # seconds


class MailerError(Exception):
    """The email provider rejected or never received a message."""


class Mailer(Protocol):
    def send(self, to: str, subject: str, html: str) -> str:
        """Sends one message and returns the provider's message id."""
        ...


@dataclass
class SentEmail:
    to: str
    subject: str
    html: str
    provider_id: str


@dataclass
class InMemoryMailer:
    """Records outgoing mail instead of sending it."""

    outbox: list[SentEmail] = field(default_factory=list)
    fail_with: str | None = None

    def send(self, to: str, subject: str, html: str) -> str:
        if self.fail_with:
            raise MailerError(self.fail_with)
        provider_id = uuid.uuid4().hex
        self.outbox.append(SentEmail(to=to, subject=subject, html=html, provider_id=provider_id))
        return provider_id


@dataclass
class ResendMailer:
    api_key: str
    sender: str
    api_url: str = RESEND_API_URL

    def __post_init__(self):
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            }
        )

    def send(self, to: str, subject: str, html: str) -> str:
        payload = {"from": self.sender, "to": [to], "subject": subject, "html": html}
        try:
            response = self._session.post(self.api_url, json=payload, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as exc:
            raise MailerError(f"Email provider unreachable: {exc}") from exc

        if response.status_code >= 400:
            try:
                message = response.json().get("message") or response.text
            except ValueError:
                message = response.text
            raise MailerError(f"Email provider returned {response.status_code}: {message}")

        try:
            provider_id = response.json().get("id", "")
        except ValueError:
            # Accepted but unreadable; resending would duplicate the email.
            logger.warning("Email provider returned a non-JSON body for %s", to)
            provider_id = ""
        logger.info("Sent email %s to %s", provider_id, to)
        return provider_id
