"""Utility helpers for the LINE restaurant bot."""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlparse


def mask_secret(value: Optional[str], visible: int = 4) -> str:
    if not value:
        return "unset"
    if len(value) <= visible * 2:
        return "*" * len(value)
    return f"{value[:visible]}...{value[-visible:]}"


def is_http_url(value: Optional[str], *, https_only: bool = False) -> bool:
    """True for absolute http(s) URLs with a host."""
    if not value:
        return False
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    schemes = ("https",) if https_only else ("http", "https")
    return parsed.scheme in schemes and bool(parsed.netloc)


def truncate(text: str, limit: int, ellipsis: str = "…") -> str:
    if len(text) <= limit:
        return text
    if limit <= len(ellipsis):
        return text[:limit]
    return text[: limit - len(ellipsis)] + ellipsis
