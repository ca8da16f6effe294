"""
Base64url helpers for Gmail message bodies and raw outgoing messages.
"""
import base64
import binascii

from .errors import DecodeError


def _strict_decode(data: str) -> str:
    """Decode base64url text, raising DecodeError on malformed input."""
    normalized = data.replace("-", "+").replace("_", "/")
    normalized += "=" * (-len(normalized) % 4)
    try:
        raw = base64.b64decode(normalized, validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, ValueError) as e:
        raise DecodeError(str(e)) from e


def decode_base64url(data: str) -> str:
    """
    Decode a Gmail base64url body payload into text.

    Returns an empty string for empty or malformed input so that one bad
    part never breaks the whole message.
    """
    if not data:
        return ""
    try:
        return _strict_decode(data)
    except DecodeError:
        return ""


def encode_base64url(text: str) -> str:
    """Encode text as unpadded base64url, the form Gmail expects for ``raw``."""
    encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
    return encoded.replace("+", "-").replace("/", "_").rstrip("=")
