"""
Token storage backends. Records are appended, never updated in place; the
most recently inserted record is the current one.
"""
import threading
from abc import ABC, abstractmethod
from typing import List, Optional

from ..utils.models import OAuthTokenRecord
from ..utils.logger import get_logger


class TokenStore(ABC):
    """Abstract append-only store of OAuth token records."""

    @abstractmethod
    def latest(self) -> Optional[OAuthTokenRecord]:
        """Return the most recently inserted record, if any."""
        pass

    @abstractmethod
    def append(self, record: OAuthTokenRecord) -> OAuthTokenRecord:
        """Persist a new record and return it with its store-assigned id."""
        pass


class InMemoryTokenStore(TokenStore):
    """Process-local token store for local development and tests."""

    def __init__(self, records: Optional[List[OAuthTokenRecord]] = None):
        self._records: List[OAuthTokenRecord] = []
        self._lock = threading.Lock()
        for record in records or []:
            self.append(record)

    @property
    def records(self) -> List[OAuthTokenRecord]:
        return list(self._records)

    def latest(self) -> Optional[OAuthTokenRecord]:
        with self._lock:
            return self._records[-1] if self._records else None

    def append(self, record: OAuthTokenRecord) -> OAuthTokenRecord:
        with self._lock:
            stored = OAuthTokenRecord(
                access_token=record.access_token,
                refresh_token=record.refresh_token,
                expires_at=record.expires_at,
                id=len(self._records) + 1,
            )
            self._records.append(stored)
            return stored


class SupabaseTokenStore(TokenStore):
    """Token store backed by the ``gmail_tokens`` table in Supabase."""

    def __init__(self, supabase_client):
        self.client = supabase_client
        self.logger = get_logger("token_store")

    def latest(self) -> Optional[OAuthTokenRecord]:
        row = self.client.get_latest_token()
        return OAuthTokenRecord.from_dict(row) if row else None

    def append(self, record: OAuthTokenRecord) -> OAuthTokenRecord:
        row = self.client.insert_token(record.to_dict())
        self.logger.debug("Stored Gmail token", expires_at=record.expires_at)
        return OAuthTokenRecord.from_dict(row) if row else record
