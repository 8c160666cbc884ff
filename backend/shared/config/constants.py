"""
Centralized constants for the storefront backend.

Usage:
    from shared.config.constants import Limits, PageSizes, Providers

    if entry_per_page not in PageSizes.PRODUCTS:
        ...
"""

from typing import Final


# =============================================================================
# Account Providers
# =============================================================================


class Providers:
    """How a user account authenticates."""

    CREDENTIALS: Final[str] = "credentials"
    OAUTH: Final[str] = "oauth"


# =============================================================================
# Pagination
# =============================================================================


class PageSizes:
    """Allowed entry_per_page values per listing."""

    USERS: Final[frozenset[int]] = frozenset({10, 25, 50, 100})
    PRODUCTS: Final[frozenset[int]] = frozenset({10, 25, 50, 100})
    CATEGORIES: Final[frozenset[int]] = frozenset({10, 20, 50})

    DEFAULT: Final[int] = 10


class SortFields:
    """Sortable columns per listing. Anything else falls back to DEFAULT."""

    USERS: Final[frozenset[str]] = frozenset({"created_at", "updated_at", "first_name"})
    PRODUCTS: Final[frozenset[str]] = frozenset({"name", "price", "created_at", "updated_at"})
    CATEGORIES: Final[frozenset[str]] = frozenset({"name", "created_at"})

    DEFAULT: Final[str] = "created_at"


# =============================================================================
# Validation Limits
# =============================================================================


class Limits:
    """Validation limits."""

    # Password policy
    MIN_PASSWORD_LENGTH: Final[int] = 8
    MAX_PASSWORD_LENGTH: Final[int] = 20

    # String lengths
    MAX_NAME_LENGTH: Final[int] = 200
    MAX_DESCRIPTION_LENGTH: Final[int] = 2000
    MAX_META_TITLE_LENGTH: Final[int] = 70
    MAX_META_DESCRIPTION_LENGTH: Final[int] = 160
    MAX_URL_LENGTH: Final[int] = 2048
    MAX_SEARCH_TERM_LENGTH: Final[int] = 100
    MAX_SLUG_LENGTH: Final[int] = 220

    # Catalog
    MAX_PRODUCT_IMAGES: Final[int] = 10
    MAX_SAVED_ADDRESSES: Final[int] = 10
