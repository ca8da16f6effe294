"""
Configuration settings for the Vacation Rental Gmail integration.
"""
import os
from typing import Tuple
from dataclasses import dataclass
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@dataclass
class GmailConfig:
    """Gmail OAuth and REST API configuration settings."""
    client_id: str = os.getenv("GMAIL_CLIENT_ID", "")
    client_secret: str = os.getenv("GMAIL_CLIENT_SECRET", "")
    redirect_uri: str = os.getenv("GMAIL_REDIRECT_URI", "http://127.0.0.1:8001/api/v1/gmail/callback")
    send_from: str = os.getenv("GMAIL_SEND_FROM", "")

    auth_url: str = os.getenv("GMAIL_AUTH_URL", "https://accounts.google.com/o/oauth2/v2/auth")
    token_url: str = os.getenv("GMAIL_TOKEN_URL", "https://oauth2.googleapis.com/token")
    api_base_url: str = os.getenv("GMAIL_API_BASE_URL", "https://gmail.googleapis.com/gmail/v1/users/me")

    fetch_limit: int = int(os.getenv("GMAIL_FETCH_LIMIT", "50"))
    fetch_workers: int = int(os.getenv("GMAIL_FETCH_WORKERS", "1"))
    request_timeout: float = float(os.getenv("GMAIL_REQUEST_TIMEOUT", "10"))

    # Seconds before expiry at which a stored access token counts as stale
    expiry_margin: int = 60

    scopes: Tuple[str, ...] = (
        "https://www.googleapis.com/auth/gmail.readonly",
        "https://www.googleapis.com/auth/gmail.send",
    )
    metadata_headers: Tuple[str, ...] = ("From", "Subject", "Date")


@dataclass
class SupabaseConfig:
    """Supabase configuration settings."""
    url: str = os.getenv("SUPABASE_URL", "")
    anon_key: str = os.getenv("SUPABASE_ANON_KEY", "")
    service_role_key: str = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")

    def get_auth_key(self) -> str:
        """Prefer service role key for server-side operations when available."""
        return self.service_role_key or self.anon_key


@dataclass
class AppConfig:
    """Application configuration settings."""
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    default_timezone: str = os.getenv("DEFAULT_TIMEZONE", "Europe/Vienna")
    token_store: str = os.getenv("TOKEN_STORE", "supabase")

    # Data storage table names
    tokens_collection: str = "gmail_tokens"
    emails_collection: str = "emails"

    # Display formatting for normalized messages (de-AT style)
    date_display_format: str = "%d.%m.%Y, %H:%M"
    unknown_sender: str = "Unbekannt"
    missing_subject: str = "(Kein Betreff)"
    error_sender: str = "Fehler"


gmail_config = GmailConfig()
supabase_config = SupabaseConfig()
app_config = AppConfig()
