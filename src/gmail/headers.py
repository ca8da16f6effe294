"""
Header lookup and display helpers for Gmail message payloads.
"""
import re
from datetime import timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Optional, Tuple
from zoneinfo import ZoneInfo

from config.settings import app_config

_SENDER_RE = re.compile(r'^(.*?)\s*<([^<>]+)>\s*$')


def find_header(payload: Dict[str, Any], name: str) -> Optional[str]:
    """Return the value of a top-level header, matching the name case-insensitively."""
    wanted = name.lower()
    for header in (payload or {}).get("headers") or []:
        if (header.get("name") or "").lower() == wanted:
            return header.get("value")
    return None


def parse_sender_address(from_header: Optional[str]) -> Tuple[str, str]:
    """
    Split a From header into ``(display_name, email)``.

    ``"Jane Doe" <jane@x.com>`` gives ``("Jane Doe", "jane@x.com")``; a header
    without angle brackets is returned whole as the email part.
    """
    if not from_header:
        return "", ""
    match = _SENDER_RE.match(from_header.strip())
    if not match:
        return "", from_header.strip()
    name = match.group(1).strip().strip('"').strip()
    return name, match.group(2).strip()


def parse_sender(from_header: Optional[str]) -> str:
    """Display name for a From header: name, else email, else the raw header."""
    if not from_header or not from_header.strip():
        return app_config.unknown_sender
    name, address = parse_sender_address(from_header)
    return name or address or from_header


def format_date(date_header: Optional[str], tz_name: Optional[str] = None) -> str:
    """
    Render an RFC 2822 date as ``dd.mm.yyyy, HH:MM`` in the configured timezone.

    Unparseable headers are returned unchanged; a missing header gives ``""``.
    """
    if not date_header:
        return ""
    try:
        parsed = parsedate_to_datetime(date_header)
        if parsed is None:
            return date_header
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        local = parsed.astimezone(ZoneInfo(tz_name or app_config.default_timezone))
        return local.strftime(app_config.date_display_format)
    except (TypeError, ValueError, IndexError, OverflowError):
        return date_header
