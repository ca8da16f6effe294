"""
Exceptions raised by the Gmail pipeline.
"""
from typing import Any, Dict, Optional


class GmailError(Exception):
    """Base class for Gmail integration failures."""


class Unauthenticated(GmailError):
    """No OAuth token has been stored yet."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class TokenRefreshFailed(GmailError):
    """The provider rejected the refresh-token grant."""

    def __init__(self, payload: Optional[Dict[str, Any]] = None):
        self.payload = payload or {}
        super().__init__(f"Token refresh failed: {self.payload}")


class TokenExchangeFailed(GmailError):
    """The provider rejected the authorization-code grant."""

    def __init__(self, payload: Optional[Dict[str, Any]] = None):
        self.payload = payload or {}
        super().__init__(f"Failed to get tokens: {self.payload}")


class InvalidRequest(GmailError):
    """A required field was missing from the request."""


class SendFailed(GmailError):
    """Gmail answered the send call with a non-success status."""

    def __init__(self, status_code: int, response_text: str):
        self.status_code = status_code
        self.response_text = response_text
        super().__init__(f"Failed to send ({status_code}): {response_text}")


class FetchFailed(GmailError):
    """The message listing call failed."""

    def __init__(self, status_code: Optional[int], response_text: str):
        self.status_code = status_code
        self.response_text = response_text
        super().__init__(f"Failed to list messages ({status_code}): {response_text}")


class PerMessageFetchError(GmailError):
    """A single message could not be fetched; never aborts a batch."""

    def __init__(self, message_id: str, reason: str):
        self.message_id = message_id
        self.reason = reason
        super().__init__(f"Fehler beim Laden der Nachricht {message_id}: {reason}")


class DecodeError(GmailError):
    """Malformed base64url payload."""
