"""
Dependency injection and service container for FastAPI application.
"""
from typing import Optional
from functools import lru_cache

from ..gmail.service import GmailService
from ..gmail.token_store import TokenStore, InMemoryTokenStore, SupabaseTokenStore
from ..supabase_sync.supabase_client import SupabaseClient
from ..utils.logger import setup_logger
from config.settings import app_config
from .config import settings
from .services.mailbox_service import MailboxService


# Global service instances
_supabase_client: Optional[SupabaseClient] = None
_logger = None


def get_logger():
    """Get application logger instance."""
    global _logger
    if _logger is None:
        _logger = setup_logger("fastapi_app", settings.log_level)
    return _logger


def get_supabase_client() -> SupabaseClient:
    """Get Supabase client instance."""
    global _supabase_client
    if _supabase_client is None:
        _supabase_client = SupabaseClient()
    return _supabase_client


@lru_cache(maxsize=1)
def get_token_store() -> TokenStore:
    """Token store selected by TOKEN_STORE (``supabase`` or ``memory``)."""
    if app_config.token_store == "memory":
        get_logger().warning("Using in-memory token store; tokens are lost on restart")
        return InMemoryTokenStore()
    return SupabaseTokenStore(get_supabase_client())


@lru_cache(maxsize=1)
def get_gmail_service() -> GmailService:
    """Get Gmail service instance with caching."""
    return GmailService(get_token_store())


@lru_cache(maxsize=1)
def get_mailbox_service() -> MailboxService:
    """Get mailbox service instance with caching."""
    return MailboxService(get_gmail_service(), get_supabase_client(), get_logger())


def reset_services():
    """Drop cached instances so the next request builds fresh ones."""
    global _supabase_client, _logger
    _supabase_client = None
    _logger = None
    get_token_store.cache_clear()
    get_gmail_service.cache_clear()
    get_mailbox_service.cache_clear()
