"""URL slug helpers for recipe titles."""

from __future__ import annotations
import re
from typing import Iterable


def slugify(text: str) -> str:
    """Lowercase, drop punctuation, join words with single hyphens."""
    s = (text or "").lower().strip()
    s = re.sub(r"[^\w\s-]", "", s)
    s = re.sub(r"[\s_-]+", "-", s)
    return s.strip("-")


def generate_unique_slug(title: str, existing: Iterable[str]) -> str:
    """
    Slug for ``title`` that does not collide with ``existing``.

    Collisions get a numeric suffix starting at 2: ``pasta``, ``pasta-2``, ...
    An empty slug falls back to ``recipe``.
    """
    base = slugify(title) or "recipe"
    taken = set(existing)
    if base not in taken:
        return base
    n = 2
    while f"{base}-{n}" in taken:
        n += 1
    return f"{base}-{n}"
