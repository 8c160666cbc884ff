"""
Category Repository - Data access for categories.
"""

from dataclasses import dataclass

from sqlalchemy import ColumnElement
from sqlalchemy.orm import Session

from shared.config.constants import PageSizes, SortFields
from storefront.models import Category

from .base import RepositoryFilters, SoftDeleteRepository, partial_match


@dataclass(frozen=True)
class CategoryFilters(RepositoryFilters):
    """
    Filters specific to categories.

    ``parent_id`` selects children of one category; ``root_only`` selects
    categories without a parent. ``parent_id`` wins when both are set.
    """

    name: str | None = None
    parent_id: int | None = None
    root_only: bool = False


class CategoryRepository(SoftDeleteRepository[Category]):
    """Repository for Category entities. Name and slug are unique among active categories."""

    entity_name = "Category"
    unique_fields = ("name", "slug")
    page_sizes = PageSizes.CATEGORIES
    sort_fields = SortFields.CATEGORIES

    @property
    def model(self) -> type[Category]:
        return Category

    def _entity_predicates(self, filters: RepositoryFilters) -> list[ColumnElement[bool]]:
        if not isinstance(filters, CategoryFilters):
            return []

        predicates = []
        name_match = partial_match(Category.name, filters.name)
        if name_match is not None:
            predicates.append(name_match)

        if filters.parent_id is not None:
            predicates.append(Category.parent_id == filters.parent_id)
        elif filters.root_only:
            predicates.append(Category.parent_id.is_(None))

        return predicates

    def find_by_slug(self, slug: str, include_deleted: bool = False) -> Category | None:
        return self.find_one_by(include_deleted=include_deleted, slug=slug)


def get_category_repository(db: Session) -> CategoryRepository:
    """Factory function to create CategoryRepository."""
    return CategoryRepository(db)
