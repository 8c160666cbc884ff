"""
Utilities module: Exceptions, validators, schemas, slugs.
"""

from shared.utils.exceptions import (
    NotFoundError,
    UnauthorizedError,
    ValidationError,
    ConflictError,
    InternalError,
    DatabaseError,
)
from shared.utils.validators import (
    validate_image_url,
    escape_like_pattern,
    sanitize_search_term,
    validate_input,
    set_fields,
)
from shared.utils.slug import generate_slug

__all__ = [
    "NotFoundError",
    "UnauthorizedError",
    "ValidationError",
    "ConflictError",
    "InternalError",
    "DatabaseError",
    "validate_image_url",
    "escape_like_pattern",
    "sanitize_search_term",
    "validate_input",
    "set_fields",
    "generate_slug",
]
