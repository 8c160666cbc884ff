"""
URL slug generation for catalog entities.
"""

import hashlib
import re
import unicodedata

from shared.config.constants import Limits

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def generate_slug(value: str) -> str:
    """
    Derive a URL-safe slug from a display name.

    Deterministic: the same name always yields the same slug. Accents are
    folded to ASCII, everything else collapses to single hyphens.
    Names with no usable characters (e.g. "!!!") get a short digest so the
    slug is never empty.

    >>> generate_slug("Café Chairs & Tables")
    'cafe-chairs-tables'
    """
    normalized = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    slug = _NON_SLUG_CHARS.sub("-", normalized.lower()).strip("-")
    if not slug:
        return hashlib.sha1(value.encode("utf-8")).hexdigest()[:12]
    return slug[: Limits.MAX_SLUG_LENGTH].rstrip("-")
