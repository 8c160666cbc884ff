"""
Domain services.
"""

from .category_service import CategoryService
from .product_service import ProductService
from .user_service import UserService

__all__ = ["CategoryService", "ProductService", "UserService"]
