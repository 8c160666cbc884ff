"""
Repository Layer.

Query building, pagination and the soft-delete lifecycle for each entity.

Usage:
    from storefront.repositories import ProductRepository, ProductFilters

    repo = ProductRepository(db)
    page = repo.find_all(ProductFilters(name="chair", in_stock=True))
"""

from .base import (
    RepositoryFilters,
    SoftDeleteRepository,
    partial_match,
    tombstone_filter,
)
from .pagination import PageRequest, PaginatedData
from .user import UserFilters, UserRepository, get_user_repository
from .category import CategoryFilters, CategoryRepository, get_category_repository
from .product import ProductFilters, ProductRepository, get_product_repository

__all__ = [
    "RepositoryFilters",
    "SoftDeleteRepository",
    "partial_match",
    "tombstone_filter",
    "PageRequest",
    "PaginatedData",
    "UserFilters",
    "UserRepository",
    "get_user_repository",
    "CategoryFilters",
    "CategoryRepository",
    "get_category_repository",
    "ProductFilters",
    "ProductRepository",
    "get_product_repository",
]
