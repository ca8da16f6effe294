"""
MIME part walker for Gmail ``format=full`` payloads.
"""
from typing import Any, Dict, List

from .codec import decode_base64url

TEXT_MIME_TYPES = ("text/plain", "text/html")


def _collect(part: Dict[str, Any], chunks: List[str]) -> None:
    children = part.get("parts")
    if children:
        for child in children:
            _collect(child, chunks)
        return

    if part.get("mimeType") not in TEXT_MIME_TYPES:
        return
    data = (part.get("body") or {}).get("data")
    if data:
        chunks.append(decode_base64url(data))


def extract_body(payload: Dict[str, Any]) -> str:
    """Concatenate every decoded text/plain and text/html leaf in the part tree."""
    chunks: List[str] = []
    if payload:
        _collect(payload, chunks)
    return "".join(chunks)
