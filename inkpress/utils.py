"""Small helpers for slugs and asset references."""

from __future__ import annotations

import re
import unicodedata
from urllib.parse import urlparse

SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify(value: str, fallback: str = "asset") -> str:
    """Turn an image file stem into the readable part of its published name.

    Accents are folded (``Café`` gives ``cafe``) before anything outside
    ``a-z0-9`` collapses to single dashes.
    """
    normalized = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii").lower()
    normalized = SLUG_PATTERN.sub("-", normalized).strip("-")
    return normalized or fallback


def is_local_reference(src: str) -> bool:
    """True for paths relative to the document (``./a.png``, ``img/b.jpg``)."""
    if not src or src.startswith(("/", "#", "data:")):
        return False
    parsed = urlparse(src)
    return not parsed.scheme and not parsed.netloc
