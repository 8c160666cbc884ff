"""
Category Service.

Usage:
    from storefront.services.domain import CategoryService

    service = CategoryService(db)
    page = service.list_categories(CategoryFilters(root_only=True), actor)
    category = service.create({"name": "Chairs"}, admin)
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from shared.utils.exceptions import ConflictError, ValidationError
from shared.utils.schemas import CategoryCreate, CategoryOutput, CategoryUpdate
from storefront.models import Category
from storefront.repositories import (
    CategoryFilters,
    PaginatedData,
    get_category_repository,
    get_product_repository,
)
from storefront.services.base_service import SoftDeleteCRUDService
from storefront.services.permissions import ActingUser, PermissionContext, Resource


class CategoryService(SoftDeleteCRUDService[Category, CategoryOutput]):
    """
    Service for category management.

    Business rules:
    - Name and slug are unique among active categories
    - A parent must be an active category other than itself
    - A category referenced by any product, deleted or not, cannot be deleted
    """

    resource = Resource.CATEGORY
    slug_source = "name"

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            repository=get_category_repository(db),
            output_schema=CategoryOutput,
            create_schema=CategoryCreate,
            update_schema=CategoryUpdate,
        )
        self._products = get_product_repository(db)

    # =========================================================================
    # Query Methods
    # =========================================================================

    def get_category_by_slug(
        self,
        slug: str,
        actor: ActingUser,
        include_deleted: bool = False,
    ) -> CategoryOutput | None:
        ctx = PermissionContext(actor)
        entity = self._repo.find_by_slug(slug, include_deleted=include_deleted and ctx.is_admin)
        return self.to_output(entity) if entity is not None else None

    def list_categories(
        self,
        filters: CategoryFilters,
        actor: ActingUser,
    ) -> PaginatedData[CategoryOutput]:
        return self.list_all(filters, actor)

    # =========================================================================
    # Validation Hooks
    # =========================================================================

    def _validate_create(self, values: dict[str, Any]) -> None:
        self._check_parent(values.get("parent_id"))

    def _validate_update(self, entity: Category, values: dict[str, Any]) -> None:
        if "parent_id" not in values:
            return
        if values["parent_id"] == entity.id:
            raise ValidationError.for_field(
                "parent_id", "A category cannot be its own parent", category_id=entity.id
            )
        self._check_parent(values["parent_id"])

    def _validate_delete(self, entity: Category) -> None:
        """Products keep pointing at a category after they are deleted, so count them all."""
        assigned = self._products.count_in_category(entity.id, include_deleted=True)
        if assigned > 0:
            raise ConflictError(
                f"Category has {assigned} assigned products",
                category_id=entity.id,
                product_count=assigned,
            )

    def _check_parent(self, parent_id: int | None) -> None:
        if parent_id is None:
            return
        if not self._repo.exists(parent_id):
            raise ValidationError.for_field(
                "parent_id", "Parent category does not exist", parent_id=parent_id
            )
