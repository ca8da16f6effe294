"""
Outgoing mail through the Gmail ``messages/send`` endpoint.
"""
from typing import Optional

import requests

from .codec import encode_base64url
from .errors import InvalidRequest, SendFailed
from ..utils.logger import get_logger
from config.settings import GmailConfig, gmail_config


def validate_fields(to: Optional[str], subject: Optional[str], body: Optional[str]) -> None:
    """Raise InvalidRequest unless recipient, subject and body are all present."""
    missing = [name for name, value in (("to", to), ("subject", subject), ("body", body)) if not value]
    if missing:
        raise InvalidRequest(f"Missing required fields: {', '.join(missing)}")


def compose_message(to: str, subject: str, body: str, sender: Optional[str] = None) -> str:
    """Build a plain-text RFC 2822 message with CRLF line endings."""
    lines = [
        f"From: {sender}" if sender else None,
        f"To: {to}",
        f"Subject: {subject}",
        "Content-Type: text/plain; charset=utf-8",
        "MIME-Version: 1.0",
        "",
        body,
    ]
    return "\r\n".join(line for line in lines if line is not None)


class MessageSender:
    """Sends plain-text guest emails via Gmail."""

    def __init__(self, config: Optional[GmailConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or gmail_config
        self.session = session or requests.Session()
        self.logger = get_logger("message_sender")

    def send_message(self, access_token: str, to: str, subject: str, body: str) -> str:
        """
        Send a message and return the Gmail message id, or None when the
        accepted response carries no readable id.

        Raises:
            InvalidRequest: ``to``, ``subject`` or ``body`` is missing
            SendFailed: Gmail rejected the message
        """
        validate_fields(to, subject, body)

        raw = encode_base64url(compose_message(to, subject, body, self.config.send_from or None))
        try:
            response = self.session.post(
                f"{self.config.api_base_url}/messages/send",
                json={"raw": raw},
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            self.logger.error("Gmail send request failed", to=to, error=str(e))
            raise SendFailed(503, str(e)) from e

        if not response.ok:
            self.logger.error("Gmail API error", status=response.status_code, error=response.text)
            raise SendFailed(response.status_code, response.text)

        try:
            message_id = response.json().get("id")
        except ValueError:
            self.logger.warning("Gmail accepted the message without a readable id", status=response.status_code)
            message_id = None
        self.logger.info("Message sent", message_id=message_id, to=to)
        return message_id
