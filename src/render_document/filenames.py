"""Output file naming."""

import re
from typing import Optional

_DISALLOWED_RE = re.compile(r'[/\\?%*:|"<>]')
_NON_WORD_RE = re.compile(r"[^a-zA-Z0-9\-\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def sanitize_filename(title: Optional[str]) -> str:
    """Turn an article title into a safe file stem; falls back to "document"."""
    if not title:
        return "document"
    sanitized = _DISALLOWED_RE.sub("", title)
    sanitized = _NON_WORD_RE.sub(" ", sanitized)
    sanitized = _WHITESPACE_RE.sub(" ", sanitized).strip()
    return sanitized or "document"
