"""Cleaning of free text that users send in."""

from __future__ import annotations
import re
from typing import Optional

_TAG = re.compile(r"<[^>]*>")
_LIKE_SPECIAL = re.compile(r"([\\%_])")

LIKE_ESCAPE = "\\"


def strip_html(value: Optional[str]) -> Optional[str]:
    """Remove HTML tags and trim. ``None`` passes through."""
    if value is None:
        return None
    return _TAG.sub("", value).strip()


def escape_like(text: str) -> str:
    """Escape ``%``, ``_`` and the escape character for use in LIKE/ILIKE patterns."""
    return _LIKE_SPECIAL.sub(r"\\\1", text)


def contains_pattern(text: str) -> str:
    return f"%{escape_like(text)}%"
