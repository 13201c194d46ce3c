"""
Text normalization for entity resolution.

Pure, total string canonicalisation used to build and query the venue index
and to compute event fingerprints:
- normalize_text: case-fold, strip diacritics, collapse whitespace
- normalize_handle: social handle form (no leading "@")
- slugify: URL-safe slug
"""

from __future__ import annotations

import re
import unicodedata

_WHITESPACE_RE = re.compile(r"\s+")
_NON_SLUG_RE = re.compile(r"[^a-z0-9-]")
_DASHES_RE = re.compile(r"-+")


def normalize_text(value: str | None) -> str:
    """
    Canonicalise a free-text label (venue name, alias, event title).

    Lowercases, decomposes to NFD, drops combining marks and collapses every
    whitespace run to a single space.

    Example:
        >>> normalize_text("  Lux   Frágil ")
        'lux fragil'
    """
    if not value:
        return ""
    text = unicodedata.normalize("NFD", str(value).lower())
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_handle(value: str | None) -> str:
    """Normalize a social handle: trim, lowercase, strip one leading '@'."""
    if not value:
        return ""
    handle = str(value).strip().lower()
    if handle.startswith("@"):
        handle = handle[1:]
    return handle


def slugify(value: str | None) -> str:
    """
    Build a URL slug from a display name.

    Example:
        >>> slugify("Teatro São Luiz")
        'teatro-sao-luiz'
    """
    text = normalize_text(value)
    if not text:
        return ""
    text = text.replace(" ", "-")
    text = _NON_SLUG_RE.sub("", text)
    text = _DASHES_RE.sub("-", text)
    return text.strip("-")
