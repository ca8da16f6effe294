"""
Gmail service combining token management, fetching and sending.
"""
from typing import List, Optional, Union

from .fetcher import MessageFetcher
from .sender import MessageSender, validate_fields
from .token_manager import TokenManager
from .token_store import TokenStore
from ..utils.logger import get_logger
from ..utils.models import MessageFormat, NormalizedMessage, SendResult


class GmailService:
    """Entry point used by the API routes and the CLI."""

    def __init__(
        self,
        store: TokenStore,
        token_manager: Optional[TokenManager] = None,
        fetcher: Optional[MessageFetcher] = None,
        sender: Optional[MessageSender] = None,
    ):
        self.store = store
        self.token_manager = token_manager or TokenManager()
        self.fetcher = fetcher or MessageFetcher()
        self.sender = sender or MessageSender()
        self.logger = get_logger("gmail_service")

    def authorization_url(self) -> str:
        return self.token_manager.build_authorization_url()

    def complete_authorization(self, code: str):
        return self.token_manager.exchange_code(self.store, code)

    def fetch_messages(
        self,
        limit: Optional[int] = None,
        fmt: Union[MessageFormat, str] = MessageFormat.FULL,
    ) -> List[NormalizedMessage]:
        """Recent messages for the connected mailbox."""
        access_token = self.token_manager.get_valid_access_token(self.store)
        return self.fetcher.list_recent_messages(access_token, limit, fmt)

    def send_email(self, to: str, subject: str, body: str) -> SendResult:
        # Validate before touching the token store or the network
        validate_fields(to, subject, body)
        access_token = self.token_manager.get_valid_access_token(self.store)
        message_id = self.sender.send_message(access_token, to, subject, body)
        return SendResult(success=True, message_id=message_id)
