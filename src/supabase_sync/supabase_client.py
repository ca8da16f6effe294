"""
Supabase client helper for Gmail tokens and stored guest emails.
"""
from typing import Optional, Dict, Any, List, Iterable

from supabase import create_client

from ..utils.models import NormalizedMessage
from ..utils.logger import get_logger
from config.settings import supabase_config, app_config


class SupabaseClient:
    """Supabase client for the ``gmail_tokens`` and ``emails`` tables."""

    def __init__(self):
        self.logger = get_logger("supabase_client")
        self.client = None
        self.initialized = False

    def initialize(self) -> bool:
        """Initialize Supabase client from environment configuration."""
        try:
            if self.initialized:
                return True

            auth_key = supabase_config.get_auth_key()
            if not supabase_config.url or not auth_key:
                self.logger.error("Supabase configuration missing", url=bool(supabase_config.url))
                return False

            self.client = create_client(supabase_config.url, auth_key)
            self.initialized = True
            self.logger.info("Supabase client initialized successfully", url=supabase_config.url)
            return True
        except Exception as e:
            self.logger.error("Failed to initialize Supabase client", error=str(e))
            self.initialized = False
            return False

    def _require_client(self):
        if not self.initialized and not self.initialize():
            raise RuntimeError("Supabase client not initialized")
        return self.client

    @staticmethod
    def _rows(res) -> List[Dict[str, Any]]:
        return getattr(res, "data", None) or []

    # Tokens
    def get_latest_token(self) -> Optional[Dict[str, Any]]:
        """Most recently inserted token row, or None when nothing is stored."""
        try:
            res = (
                self._require_client()
                .table(app_config.tokens_collection)
                .select("*")
                .order("id", desc=True)
                .limit(1)
                .execute()
            )
            rows = self._rows(res)
            return rows[0] if rows else None
        except Exception as e:
            self.logger.error("Error reading Gmail token", error=str(e))
            raise

    def insert_token(self, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Append a token row; earlier rows are kept as history."""
        try:
            res = (
                self._require_client()
                .table(app_config.tokens_collection)
                .insert(payload)
                .execute()
            )
            rows = self._rows(res)
            self.logger.info("Inserted Gmail token", expires_at=payload.get("expires_at"))
            return rows[0] if rows else None
        except Exception as e:
            self.logger.error("Error storing Gmail token", error=str(e))
            raise

    # Emails
    def upsert_emails(self, messages: Iterable[NormalizedMessage]) -> int:
        """Insert or replace fetched messages by id. Error placeholders are skipped."""
        rows = [m.to_row() for m in messages if not m.is_error]
        if not rows:
            return 0
        try:
            (
                self._require_client()
                .table(app_config.emails_collection)
                .upsert(rows, on_conflict="id")
                .execute()
            )
            self.logger.info("Stored emails", count=len(rows))
            return len(rows)
        except Exception as e:
            self.logger.error("Error storing emails", count=len(rows), error=str(e))
            raise

    def list_emails(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Stored emails, newest first."""
        try:
            query = (
                self._require_client()
                .table(app_config.emails_collection)
                .select("*")
                .order("date", desc=True)
            )
            if limit:
                query = query.limit(limit)
            return self._rows(query.execute())
        except Exception as e:
            self.logger.error("Error listing emails", error=str(e))
            raise

    def assign_email(self, email_id: str, booking_id: Optional[str]) -> bool:
        """Link a stored email to a booking; ``None`` clears the link."""
        try:
            (
                self._require_client()
                .table(app_config.emails_collection)
                .update({"booking_id": booking_id})
                .eq("id", email_id)
                .execute()
            )
            self.logger.info("Assigned email to booking", email_id=email_id, booking_id=booking_id)
            return True
        except Exception as e:
            self.logger.error("Error assigning email", email_id=email_id, error=str(e))
            raise

    # Context manager helpers
    def __enter__(self):
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        pass
