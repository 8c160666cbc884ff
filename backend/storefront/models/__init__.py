"""
SQLAlchemy ORM Models Package.

- base: Base class, SoftDeleteMixin, active_unique_index
- user: User
- catalog: Category, Product
"""

from .base import Base, SoftDeleteMixin, active_unique_index
from .user import User
from .catalog import Category, Product

__all__ = [
    "Base",
    "SoftDeleteMixin",
    "active_unique_index",
    "User",
    "Category",
    "Product",
]
