"""
OAuth token handling for the Gmail integration: authorization URL, code
exchange and refresh of the stored access token.
"""
import time
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlencode

import requests

from .errors import InvalidRequest, TokenExchangeFailed, TokenRefreshFailed, Unauthenticated
from .token_store import TokenStore
from ..utils.logger import get_logger
from ..utils.models import OAuthTokenRecord
from config.settings import GmailConfig, gmail_config


class TokenManager:
    """Keeps a valid Gmail access token available from a token store."""

    def __init__(
        self,
        config: Optional[GmailConfig] = None,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config or gmail_config
        self.session = session or requests.Session()
        self.clock = clock
        self.logger = get_logger("token_manager")

    def build_authorization_url(self) -> str:
        """URL of the Google consent screen requesting offline Gmail access."""
        params = {
            "client_id": self.config.client_id,
            "redirect_uri": self.config.redirect_uri,
            "response_type": "code",
            "scope": " ".join(self.config.scopes),
            "access_type": "offline",
            "prompt": "consent",
        }
        return f"{self.config.auth_url}?{urlencode(params)}"

    def exchange_code(self, store: TokenStore, code: str) -> OAuthTokenRecord:
        """Exchange an authorization code for tokens and store them."""
        if not code:
            raise InvalidRequest("Authorization failed: missing code")

        tokens = self._post_token_request({
            "code": code,
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "redirect_uri": self.config.redirect_uri,
            "grant_type": "authorization_code",
        })
        if not tokens.get("access_token"):
            self.logger.error("Authorization code exchange failed", response=tokens)
            raise TokenExchangeFailed(tokens)

        record = store.append(OAuthTokenRecord(
            access_token=tokens["access_token"],
            refresh_token=tokens.get("refresh_token", ""),
            expires_at=self._expiry_from(tokens),
        ))
        self.logger.info("Stored Gmail tokens from authorization", expires_at=record.expires_at)
        return record

    def get_valid_access_token(self, store: TokenStore) -> str:
        """
        Return a usable access token, refreshing it first when it is stale.

        A refresh appends a new record carrying the same refresh token.

        Raises:
            Unauthenticated: no token has been stored
            TokenRefreshFailed: the provider did not return an access token
        """
        current = store.latest()
        if current is None:
            raise Unauthenticated("No Gmail token stored")

        if not current.is_stale(self.clock(), self.config.expiry_margin):
            return current.access_token

        self.logger.info("Access token expired, refreshing", expires_at=current.expires_at)
        refreshed = self.refresh(store, current)
        return refreshed.access_token

    def refresh(self, store: TokenStore, current: OAuthTokenRecord) -> OAuthTokenRecord:
        """Run the refresh-token grant for ``current`` and append the result."""
        tokens = self._post_token_request({
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "refresh_token": current.refresh_token,
            "grant_type": "refresh_token",
        })
        if not tokens.get("access_token"):
            self.logger.error("Token refresh rejected", response=tokens)
            raise TokenRefreshFailed(tokens)

        record = store.append(OAuthTokenRecord(
            access_token=tokens["access_token"],
            refresh_token=current.refresh_token,
            expires_at=self._expiry_from(tokens),
        ))
        self.logger.info("Access token refreshed", expires_at=record.expires_at)
        return record

    def _expiry_from(self, tokens: Dict[str, Any]) -> int:
        return int(self.clock()) + int(tokens.get("expires_in") or 3600)

    def _post_token_request(self, form: Dict[str, str]) -> Dict[str, Any]:
        """POST a form-encoded grant and return the decoded JSON body."""
        try:
            response = self.session.post(
                self.config.token_url,
                data=form,
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            self.logger.error("Token endpoint unreachable", error=str(e))
            return {"error": "request_failed", "error_description": str(e)}

        try:
            return response.json()
        except ValueError:
            return {"error": "invalid_response", "status": response.status_code, "body": response.text}
