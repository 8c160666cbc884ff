"""
Shared validators for input sanitization and security.
"""

import re
from collections.abc import Mapping
from typing import Any, Optional, TypeVar
from urllib.parse import urlparse

import pydantic
from pydantic import BaseModel

from shared.config.constants import Limits
from shared.utils.exceptions import ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)

# Internal domains/IPs that should never be in image URLs (SSRF prevention)
BLOCKED_HOSTS = [
    "localhost",
    "127.0.0.1",
    "0.0.0.0",
    "10.",
    "172.16.",
    "172.31.",
    "192.168.",
    "169.254.",  # Link-local and cloud metadata
    "[::1]",
    "metadata.google",
]

BLOCKED_SCHEMES = {"javascript", "data", "file", "ftp", "mailto", "tel"}


def validate_image_url(url: Optional[str]) -> Optional[str]:
    """
    Validate and sanitize an image URL.

    Returns the stripped URL, or None for empty input.

    Raises:
        ValueError: If the URL is invalid or points at an internal host
    """
    if url is None:
        return None

    url = url.strip()
    if not url:
        return None

    if len(url) > Limits.MAX_URL_LENGTH:
        raise ValueError(f"URL too long (max {Limits.MAX_URL_LENGTH} characters)")

    parsed = urlparse(url)

    scheme = parsed.scheme.lower()
    if scheme in BLOCKED_SCHEMES:
        raise ValueError(f"URL scheme not allowed: {scheme}")
    if scheme not in ("http", "https"):
        raise ValueError("Only HTTP/HTTPS URLs are allowed")

    host = parsed.netloc.lower()
    if not host:
        raise ValueError("URL has no host")

    for blocked in BLOCKED_HOSTS:
        if host.startswith(blocked):
            raise ValueError("Internal URLs are not allowed")

    return url


def escape_like_pattern(value: str) -> str:
    """
    Escape special characters in LIKE patterns.

    SQL LIKE uses % and _ as wildcards; escaping them keeps user input
    a literal fragment. Pair with ``escape="\\\\"`` on the comparison.
    """
    if not value:
        return value

    # Escape the escape character first, then the wildcards
    value = value.replace("\\", "\\\\")
    value = value.replace("%", "\\%")
    value = value.replace("_", "\\_")
    return value


def sanitize_search_term(term: str | None, max_length: int = Limits.MAX_SEARCH_TERM_LENGTH) -> str:
    """
    Sanitize search term for safe use in queries.

    Strips whitespace, drops control characters and truncates to max_length.
    """
    if not term:
        return ""

    term = re.sub(r"[\x00-\x1f\x7f-\x9f]", "", term.strip())
    return term[:max_length]


def validate_input(schema: type[SchemaT], data: Mapping[str, Any] | BaseModel) -> SchemaT:
    """
    Parse ``data`` against a pydantic schema.

    Accepts a raw mapping or an already-built model (re-validated so that
    instances built with ``model_construct`` cannot skip the rules).

    Raises:
        ValidationError: listing every offending field path
    """
    if isinstance(data, BaseModel):
        data = set_fields(data)

    try:
        return schema.model_validate(data)
    except pydantic.ValidationError as exc:
        errors = [
            {
                "path": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
        raise ValidationError(errors, schema=schema.__name__) from exc


def set_fields(model: BaseModel) -> dict[str, Any]:
    """
    Top-level fields the caller set, each dumped in full.

    Nested models keep their defaulted members, so a patch stores the same
    shape a create would.
    """
    dumped = model.model_dump()
    return {name: dumped[name] for name in model.model_fields_set}
