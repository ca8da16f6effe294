"""
Gmail REST message fetcher producing normalized messages.
"""
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Union

import requests

from .errors import FetchFailed, PerMessageFetchError
from .headers import find_header, format_date, parse_sender, parse_sender_address
from .mime import extract_body
from ..utils.logger import get_logger
from ..utils.models import MessageFormat, NormalizedMessage
from config.settings import GmailConfig, app_config, gmail_config


def normalize_message(raw: Dict[str, Any], tz_name: Optional[str] = None) -> NormalizedMessage:
    """Convert a Gmail message resource into a NormalizedMessage."""
    payload = raw.get("payload") or {}
    snippet = raw.get("snippet") or ""

    from_header = find_header(payload, "From")
    _, from_email = parse_sender_address(from_header)

    internal_date = raw.get("internalDate")
    return NormalizedMessage(
        id=raw.get("id", ""),
        thread_id=raw.get("threadId"),
        from_name=parse_sender(from_header),
        from_email=from_email,
        subject=find_header(payload, "Subject") or app_config.missing_subject,
        date=format_date(find_header(payload, "Date"), tz_name),
        body=extract_body(payload) or snippet,
        snippet=snippet,
        internal_date=int(internal_date) // 1000 if internal_date else None,
    )


def error_placeholder(message_id: str, error: Exception) -> NormalizedMessage:
    """Stand-in record for a message that could not be loaded."""
    return NormalizedMessage(
        id=message_id,
        from_name=app_config.error_sender,
        subject=str(error),
        date="",
        body="",
        is_error=True,
    )


class MessageFetcher:
    """Lists recent Gmail messages and loads each one."""

    def __init__(
        self,
        config: Optional[GmailConfig] = None,
        session: Optional[requests.Session] = None,
        max_workers: Optional[int] = None,
    ):
        self.config = config or gmail_config
        self.session = session or requests.Session()
        self.max_workers = max_workers if max_workers is not None else self.config.fetch_workers
        self.logger = get_logger("message_fetcher")

    def list_message_ids(self, access_token: str, limit: int) -> List[str]:
        """IDs of the ``limit`` most recent messages, in provider order."""
        try:
            response = self.session.get(
                f"{self.config.api_base_url}/messages",
                params={"maxResults": limit},
                headers=self._auth_headers(access_token),
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            self.logger.error("Message listing failed", error=str(e))
            raise FetchFailed(None, str(e)) from e

        if not response.ok:
            self.logger.error("Message listing rejected", status=response.status_code)
            raise FetchFailed(response.status_code, response.text)

        try:
            messages = response.json().get("messages") or []
        except ValueError:
            self.logger.error("Message listing returned invalid JSON", status=response.status_code)
            raise FetchFailed(response.status_code, response.text)
        return [m["id"] for m in messages if m.get("id")]

    def get_message(
        self,
        access_token: str,
        message_id: str,
        fmt: Union[MessageFormat, str] = MessageFormat.FULL,
    ) -> Dict[str, Any]:
        """Load one raw message resource."""
        fmt = MessageFormat(fmt)
        params: Dict[str, Any] = {"format": fmt.value}
        if fmt is MessageFormat.METADATA:
            params["metadataHeaders"] = list(self.config.metadata_headers)

        try:
            response = self.session.get(
                f"{self.config.api_base_url}/messages/{message_id}",
                params=params,
                headers=self._auth_headers(access_token),
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            raise PerMessageFetchError(message_id, str(e)) from e

        if not response.ok:
            raise PerMessageFetchError(message_id, f"HTTP {response.status_code}: {response.text}")
        try:
            return response.json()
        except ValueError as e:
            raise PerMessageFetchError(message_id, "invalid JSON response") from e

    def fetch_normalized(
        self,
        access_token: str,
        message_id: str,
        fmt: Union[MessageFormat, str] = MessageFormat.FULL,
    ) -> NormalizedMessage:
        """Load and normalize one message; failures become a placeholder."""
        try:
            return normalize_message(self.get_message(access_token, message_id, fmt))
        except Exception as e:
            self.logger.warning("Could not load message", message_id=message_id, error=str(e))
            return error_placeholder(message_id, e)

    def list_recent_messages(
        self,
        access_token: str,
        limit: Optional[int] = None,
        fmt: Union[MessageFormat, str] = MessageFormat.FULL,
    ) -> List[NormalizedMessage]:
        """
        Fetch and normalize the most recent messages.

        Args:
            access_token: Valid Gmail access token
            limit: Maximum number of messages (defaults to GMAIL_FETCH_LIMIT)
            fmt: ``full`` for bodies, ``metadata`` for headers only

        Returns:
            Messages in listing order; unloadable ones are error placeholders
        """
        limit = limit or self.config.fetch_limit
        message_ids = self.list_message_ids(access_token, limit)
        if not message_ids:
            self.logger.info("No messages in mailbox")
            return []

        if self.max_workers and self.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                messages = list(pool.map(
                    lambda mid: self.fetch_normalized(access_token, mid, fmt),
                    message_ids,
                ))
        else:
            messages = [self.fetch_normalized(access_token, mid, fmt) for mid in message_ids]

        self.logger.info("Fetched messages", count=len(messages))
        return messages

    @staticmethod
    def _auth_headers(access_token: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {access_token}"}
