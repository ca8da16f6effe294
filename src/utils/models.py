"""
Data models for the Vacation Rental Gmail integration.
"""
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional, Dict, Any


class MessageFormat(Enum):
    """Gmail message-get formats supported by the fetcher."""
    FULL = "full"
    METADATA = "metadata"


@dataclass
class OAuthTokenRecord:
    """Stored OAuth token pair. Stores keep these append-only."""
    access_token: str
    refresh_token: str
    expires_at: int
    id: Optional[int] = None

    def is_stale(self, now: float, margin: int = 60) -> bool:
        """True once ``now`` has reached ``margin`` seconds before expiry."""
        return now >= self.expires_at - margin

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a row payload; the store assigns ``id``."""
        return {
            'access_token': self.access_token,
            'refresh_token': self.refresh_token,
            'expires_at': int(self.expires_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OAuthTokenRecord':
        """Create a record from a table row."""
        return cls(
            access_token=data['access_token'],
            refresh_token=data.get('refresh_token') or "",
            expires_at=int(data.get('expires_at') or 0),
            id=data.get('id'),
        )


@dataclass
class NormalizedMessage:
    """A Gmail message reduced to what the dashboard displays."""
    id: str
    from_name: str
    subject: str
    date: str
    body: str
    from_email: str = ""
    thread_id: Optional[str] = None
    snippet: str = ""
    internal_date: Optional[int] = None
    is_error: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_row(self) -> Dict[str, Any]:
        """Row payload for the ``emails`` table."""
        return {
            'id': self.id,
            'thread_id': self.thread_id,
            'from_email': self.from_email,
            'from_name': self.from_name,
            'subject': self.subject,
            'snippet': self.snippet,
            'body': self.body,
            'date': self.internal_date,
        }

    def __str__(self) -> str:
        return (f"Message(id='{self.id}', "
                f"from='{self.from_name}', "
                f"subject='{self.subject}', "
                f"date='{self.date}')")


@dataclass
class SendResult:
    """Result of a send operation."""
    success: bool
    message_id: Optional[str] = None
