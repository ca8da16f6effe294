"""
Gmail OAuth, ingestion and sending pipeline.
"""

from .errors import (
    GmailError, Unauthenticated, TokenRefreshFailed, TokenExchangeFailed,
    InvalidRequest, SendFailed, FetchFailed, PerMessageFetchError
)
from .token_store import TokenStore, InMemoryTokenStore, SupabaseTokenStore
from .token_manager import TokenManager
from .fetcher import MessageFetcher
from .sender import MessageSender
from .service import GmailService

__all__ = [
    'GmailError', 'Unauthenticated', 'TokenRefreshFailed', 'TokenExchangeFailed',
    'InvalidRequest', 'SendFailed', 'FetchFailed', 'PerMessageFetchError',
    'TokenStore', 'InMemoryTokenStore', 'SupabaseTokenStore',
    'TokenManager', 'MessageFetcher', 'MessageSender', 'GmailService'
]
