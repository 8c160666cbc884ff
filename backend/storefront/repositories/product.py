"""
Product Repository - Data access for products.
"""

from dataclasses import dataclass

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.orm import Session

from shared.config.constants import PageSizes, SortFields
from storefront.models import Product

from .base import RepositoryFilters, SoftDeleteRepository, partial_match


@dataclass(frozen=True)
class ProductFilters(RepositoryFilters):
    """
    Filters specific to products.

    Price bounds are inclusive. ``in_stock=True`` keeps products with stock
    left; False or None does not filter on stock.
    """

    name: str | None = None
    category_id: int | None = None
    in_stock: bool | None = None
    min_price: float | None = None
    max_price: float | None = None


class ProductRepository(SoftDeleteRepository[Product]):
    """Repository for Product entities. Name and slug are unique among active products."""

    entity_name = "Product"
    unique_fields = ("name", "slug")
    page_sizes = PageSizes.PRODUCTS
    sort_fields = SortFields.PRODUCTS

    @property
    def model(self) -> type[Product]:
        return Product

    def _entity_predicates(self, filters: RepositoryFilters) -> list[ColumnElement[bool]]:
        if not isinstance(filters, ProductFilters):
            return []

        predicates = []
        name_match = partial_match(Product.name, filters.name)
        if name_match is not None:
            predicates.append(name_match)

        if filters.category_id is not None:
            predicates.append(Product.category_id == filters.category_id)

        if filters.in_stock is True:
            predicates.append(Product.stock > 0)

        if filters.min_price is not None:
            predicates.append(Product.price >= filters.min_price)
        if filters.max_price is not None:
            predicates.append(Product.price <= filters.max_price)

        return predicates

    def find_by_slug(self, slug: str, include_deleted: bool = False) -> Product | None:
        return self.find_one_by(include_deleted=include_deleted, slug=slug)

    def find_by_name(self, name: str, include_deleted: bool = False) -> Product | None:
        return self.find_one_by(include_deleted=include_deleted, name=name)

    def count_in_category(self, category_id: int, include_deleted: bool = True) -> int:
        """
        Count products referencing a category.

        Tombstoned products count by default: they can still be restored
        into the category.
        """
        query = select(func.count()).select_from(Product).where(Product.category_id == category_id)
        if not include_deleted:
            query = query.where(Product.deleted_at.is_(None))
        return self._db.scalar(query) or 0


def get_product_repository(db: Session) -> ProductRepository:
    """Factory function to create ProductRepository."""
    return ProductRepository(db)
