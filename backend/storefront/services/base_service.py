"""
Base Service Classes.

Architecture:
    Caller → Service (authorization, validation, business rules)
           → Repository (queries, soft-delete lifecycle) → Model

Usage:
    class CategoryService(SoftDeleteCRUDService[Category, CategoryOutput]):
        resource = Resource.CATEGORY
        slug_source = "name"

        def __init__(self, db: Session):
            super().__init__(
                db=db,
                repository=CategoryRepository(db),
                output_schema=CategoryOutput,
                create_schema=CategoryCreate,
                update_schema=CategoryUpdate,
            )
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Session

from shared.config.logging import get_logger
from shared.utils.exceptions import NotFoundError
from shared.utils.slug import generate_slug
from shared.utils.validators import set_fields, validate_input
from storefront.models import SoftDeleteMixin
from storefront.repositories import PaginatedData, RepositoryFilters, SoftDeleteRepository
from storefront.services.permissions import (
    ActingUser,
    Action,
    PermissionContext,
    Resource,
)

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=SoftDeleteMixin)
OutputT = TypeVar("OutputT", bound=BaseModel)
FiltersT = TypeVar("FiltersT", bound=RepositoryFilters)


def visible_filters(filters: FiltersT, ctx: PermissionContext) -> FiltersT:
    """
    Filters as the actor may use them: only administrators see tombstones.
    Returns a copy; the caller's filters are left untouched.
    """
    if filters.include_deleted is True and not ctx.is_admin:
        return dataclasses.replace(filters, include_deleted=False)
    return filters


class SoftDeleteCRUDService(Generic[ModelT, OutputT]):
    """
    Base service for soft-deletable catalog entities.

    Reads are open to every actor (tombstones only for administrators);
    writes go through the authorization gate for ``resource``.

    Hooks for subclasses:
    - _validate_create / _validate_update / _validate_delete
    """

    resource: ClassVar[Resource]
    # Field the slug is derived from; None disables slugs
    slug_source: ClassVar[str | None] = None

    def __init__(
        self,
        db: Session,
        repository: SoftDeleteRepository[ModelT],
        output_schema: type[OutputT],
        create_schema: type[BaseModel],
        update_schema: type[BaseModel],
    ):
        self._db = db
        self._repo = repository
        self._output_schema = output_schema
        self._create_schema = create_schema
        self._update_schema = update_schema

    @property
    def repo(self) -> SoftDeleteRepository[ModelT]:
        """Repository for data access."""
        return self._repo

    @property
    def entity_name(self) -> str:
        return self._repo.entity_name

    def to_output(self, entity: ModelT) -> OutputT:
        return self._output_schema.model_validate(entity)

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_by_id(
        self,
        entity_id: int,
        actor: ActingUser,
        include_deleted: bool = False,
    ) -> OutputT | None:
        """Get entity by id, or None when there is no visible match."""
        ctx = PermissionContext(actor)
        entity = self._repo.find_by_id(entity_id, include_deleted=include_deleted and ctx.is_admin)
        return self.to_output(entity) if entity is not None else None

    def list_all(self, filters: RepositoryFilters, actor: ActingUser) -> PaginatedData[OutputT]:
        """
        One page of entities matching filters.

        Raises:
            ValidationError: invalid page position
        """
        ctx = PermissionContext(actor)
        page = self._repo.find_all(visible_filters(filters, ctx))
        return page.map(self.to_output)

    # =========================================================================
    # Write Operations
    # =========================================================================

    def create(self, data: Mapping[str, Any] | BaseModel, actor: ActingUser) -> OutputT:
        """
        Create a new entity.

        Raises:
            UnauthorizedError: actor may not create this resource
            ValidationError: invalid input
            ConflictError: an active entity holds a unique value
        """
        ctx = PermissionContext(actor)
        ctx.require(Action.CREATE, self.resource)

        values = validate_input(self._create_schema, data).model_dump()
        values = self._with_slug(values)
        self._validate_create(values)

        entity = self._repo.create(values)
        logger.info(
            f"{self.entity_name} created",
            entity_id=entity.id,
            actor_id=actor.id,
        )
        return self.to_output(entity)

    def update(
        self,
        entity_id: int,
        data: Mapping[str, Any] | BaseModel,
        actor: ActingUser,
    ) -> OutputT:
        """
        Apply a partial update to an active entity.

        Raises:
            UnauthorizedError: actor may not update this resource
            ValidationError: invalid input
            NotFoundError: no active entity with this id
            ConflictError: another active entity holds a unique value
        """
        ctx = PermissionContext(actor)
        ctx.require(Action.UPDATE, self.resource, target_id=entity_id)

        values = self._patch_values(validate_input(self._update_schema, data))

        entity = self._repo.find_by_id(entity_id)
        if entity is None:
            raise NotFoundError(self.entity_name, entity_id)

        values = self._with_slug(values)
        self._validate_update(entity, values)

        updated = self._repo.update(entity_id, values)
        if updated is None:
            raise NotFoundError(self.entity_name, entity_id)

        logger.info(
            f"{self.entity_name} updated",
            entity_id=entity_id,
            actor_id=actor.id,
            fields=sorted(values),
        )
        return self.to_output(updated)

    def delete(self, entity_id: int, actor: ActingUser) -> OutputT:
        """
        Soft delete an active entity and return its final state.

        Raises:
            UnauthorizedError: actor may not delete this resource
            NotFoundError: no active entity with this id
            ConflictError: a business rule forbids the delete
        """
        ctx = PermissionContext(actor)
        ctx.require(Action.DELETE, self.resource, target_id=entity_id)

        entity = self._repo.find_by_id(entity_id)
        if entity is None:
            raise NotFoundError(self.entity_name, entity_id)

        self._validate_delete(entity)

        deleted = self._repo.soft_delete(entity_id)
        if deleted is None:
            raise NotFoundError(self.entity_name, entity_id)

        logger.info(f"{self.entity_name} soft deleted", entity_id=entity_id, actor_id=actor.id)
        return self.to_output(deleted)

    def restore(self, entity_id: int, actor: ActingUser) -> OutputT | None:
        """
        Restore a soft-deleted entity.

        Returns None when there is no deleted entity with this id.

        Raises:
            UnauthorizedError: actor may not restore this resource
            ConflictError: an active entity now holds one of its unique values
        """
        ctx = PermissionContext(actor)
        ctx.require(Action.RESTORE, self.resource, target_id=entity_id)

        entity = self._repo.restore(entity_id)
        if entity is None:
            return None

        logger.info(f"{self.entity_name} restored", entity_id=entity_id, actor_id=actor.id)
        return self.to_output(entity)

    # =========================================================================
    # Hooks
    # =========================================================================

    def _validate_create(self, values: dict[str, Any]) -> None:
        """Business rules checked before insert."""
        pass

    def _validate_update(self, entity: ModelT, values: dict[str, Any]) -> None:
        """Business rules checked before update."""
        pass

    def _validate_delete(self, entity: ModelT) -> None:
        """Business rules checked before soft delete."""
        pass

    # =========================================================================
    # Helpers
    # =========================================================================

    def _patch_values(self, patch: BaseModel) -> dict[str, Any]:
        """
        Fields the caller actually set. An explicit None only clears
        nullable columns; for required columns it means "unchanged".
        """
        columns = self._repo.model.__table__.c
        return {
            name: value
            for name, value in set_fields(patch).items()
            if value is not None or columns[name].nullable
        }

    def _with_slug(self, values: dict[str, Any]) -> dict[str, Any]:
        """Derive the slug whenever the slug source field is present."""
        if self.slug_source is None or values.get(self.slug_source) is None:
            return values
        return {**values, "slug": generate_slug(values[self.slug_source])}
