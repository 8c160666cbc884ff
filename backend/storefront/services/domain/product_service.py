"""
Product Service.

Usage:
    from storefront.services.domain import ProductService

    service = ProductService(db)
    page = service.list_products(ProductFilters(in_stock=True, max_price=50), actor)
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from shared.utils.schemas import ProductCreate, ProductOutput, ProductUpdate
from storefront.models import Product
from storefront.repositories import PaginatedData, ProductFilters, get_product_repository
from storefront.services.base_service import SoftDeleteCRUDService
from storefront.services.permissions import ActingUser, PermissionContext, Resource


class ProductService(SoftDeleteCRUDService[Product, ProductOutput]):
    """
    Service for product management.

    Name and slug are unique among active products; the slug follows the
    name on every rename.
    """

    resource = Resource.PRODUCT
    slug_source = "name"

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            repository=get_product_repository(db),
            output_schema=ProductOutput,
            create_schema=ProductCreate,
            update_schema=ProductUpdate,
        )

    def get_product_by_slug(
        self,
        slug: str,
        actor: ActingUser,
        include_deleted: bool = False,
    ) -> ProductOutput | None:
        ctx = PermissionContext(actor)
        entity = self._repo.find_by_slug(slug, include_deleted=include_deleted and ctx.is_admin)
        return self.to_output(entity) if entity is not None else None

    def get_product_by_name(
        self,
        name: str,
        actor: ActingUser,
        include_deleted: bool = False,
    ) -> ProductOutput | None:
        ctx = PermissionContext(actor)
        entity = self._repo.find_by_name(name, include_deleted=include_deleted and ctx.is_admin)
        return self.to_output(entity) if entity is not None else None

    def list_products(
        self,
        filters: ProductFilters,
        actor: ActingUser,
    ) -> PaginatedData[ProductOutput]:
        return self.list_all(filters, actor)
