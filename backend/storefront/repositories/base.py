"""
Base Repository implementation.

Provides the soft-delete lifecycle shared by every entity: filtered and
paginated reads, create/update guarded by active-only uniqueness, soft
delete, and restore with conflict detection.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import ColumnElement, Select, func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import InstrumentedAttribute, Session

from shared.config.constants import PageSizes, SortFields
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import ConflictError, DatabaseError
from shared.utils.validators import escape_like_pattern, sanitize_search_term
from storefront.models import SoftDeleteMixin

from .pagination import PageRequest, PaginatedData

ModelT = TypeVar("ModelT", bound=SoftDeleteMixin)


@dataclass(frozen=True)
class RepositoryFilters:
    """
    Base filters for list queries.

    Frozen: derive adjusted copies with ``dataclasses.replace``.
    ``include_deleted`` only widens the result when it is exactly True.
    """

    # Pagination
    page_number: int = 1
    entry_per_page: int = PageSizes.DEFAULT

    # Sorting
    sort_by: str | None = None
    sort_order: str = "desc"

    # Soft delete
    include_deleted: bool | None = None


# =============================================================================
# Predicate helpers
# =============================================================================


def tombstone_filter(model: type[SoftDeleteMixin], include_deleted: bool | None) -> list[ColumnElement[bool]]:
    """Exclude tombstoned rows unless deleted rows were explicitly requested."""
    if include_deleted is True:
        return []
    return [model.deleted_at.is_(None)]


def partial_match(column: InstrumentedAttribute, term: str | None) -> ColumnElement[bool] | None:
    """
    Case-insensitive substring match on a user-supplied fragment.

    The fragment is escaped, so ``%`` and ``_`` match literally.
    Returns None when the sanitized fragment is empty.
    """
    term = sanitize_search_term(term)
    if not term:
        return None
    return column.ilike(f"%{escape_like_pattern(term)}%", escape="\\")


class SoftDeleteRepository(ABC, Generic[ModelT]):
    """
    Abstract repository for soft-deletable entities.

    Subclasses provide:
    - model: the SQLAlchemy model class
    - _entity_predicates(): filter predicates specific to the entity
    - unique_fields: fields unique among active records
    - page_sizes / sort_fields: listing limits
    """

    entity_name: ClassVar[str] = "Entity"
    unique_fields: ClassVar[tuple[str, ...]] = ()
    page_sizes: ClassVar[frozenset[int]] = PageSizes.PRODUCTS
    sort_fields: ClassVar[frozenset[str]] = frozenset({SortFields.DEFAULT})

    def __init__(self, db: Session):
        self._db = db

    @property
    @abstractmethod
    def model(self) -> type[ModelT]:
        """Return the SQLAlchemy model class."""
        ...

    @abstractmethod
    def _entity_predicates(self, filters: RepositoryFilters) -> list[ColumnElement[bool]]:
        """Entity-specific predicates for ``filters``."""
        ...

    # =========================================================================
    # Query building
    # =========================================================================

    def generate_query(self, filters: RepositoryFilters) -> list[ColumnElement[bool]]:
        """
        Compile filters into predicates, ANDed by the caller.

        Never fails: unknown or empty criteria contribute nothing.
        """
        return [
            *tombstone_filter(self.model, filters.include_deleted),
            *self._entity_predicates(filters),
        ]

    def order_by(self, filters: RepositoryFilters) -> list[ColumnElement[Any]]:
        """
        Sort clauses for ``filters``. Unsupported fields sort by creation time;
        id breaks ties so page boundaries are stable.
        """
        sort_by = filters.sort_by if filters.sort_by in self.sort_fields else SortFields.DEFAULT
        column = getattr(self.model, sort_by)
        if filters.sort_order == "asc":
            return [column.asc(), self.model.id.asc()]
        return [column.desc(), self.model.id.desc()]

    def _select(self, include_deleted: bool | None = False) -> Select:
        return select(self.model).where(*tombstone_filter(self.model, include_deleted))

    # =========================================================================
    # Reads
    # =========================================================================

    def find_all(self, filters: RepositoryFilters) -> PaginatedData[ModelT]:
        """
        Find one page of entities matching filters.

        Count and fetch use the same predicates in the same session.

        Raises:
            ValidationError: invalid page_number or entry_per_page
        """
        page = PageRequest.create(filters.page_number, filters.entry_per_page, self.page_sizes)
        predicates = self.generate_query(filters)

        total = self._db.scalar(
            select(func.count()).select_from(self.model).where(*predicates)
        ) or 0
        rows = self._db.scalars(
            select(self.model)
            .where(*predicates)
            .order_by(*self.order_by(filters))
            .offset(page.offset)
            .limit(page.limit)
        ).all()

        return PaginatedData.build(rows, total, page)

    def find_by_id(self, entity_id: int, include_deleted: bool = False) -> ModelT | None:
        return self._db.scalar(self._select(include_deleted).where(self.model.id == entity_id))

    def find_deleted_by_id(self, entity_id: int) -> ModelT | None:
        """Find a tombstoned entity; active ones are ignored."""
        return self._db.scalar(
            select(self.model).where(
                self.model.id == entity_id,
                self.model.deleted_at.is_not(None),
            )
        )

    def find_one_by(self, include_deleted: bool = False, **values: Any) -> ModelT | None:
        """
        Find a single entity by exact field values.

        With include_deleted, an active match wins over tombstoned ones,
        then the newest tombstone.
        """
        query = (
            self._select(include_deleted)
            .filter_by(**values)
            .order_by(self.model.deleted_at.is_not(None), self.model.id.desc())
            .limit(1)
        )
        return self._db.scalar(query)

    def count(self, filters: RepositoryFilters) -> int:
        """Count entities matching filters, ignoring pagination."""
        query = select(func.count()).select_from(self.model).where(*self.generate_query(filters))
        return self._db.scalar(query) or 0

    def exists(self, entity_id: int, include_deleted: bool = False) -> bool:
        query = (
            select(func.count())
            .select_from(self.model)
            .where(self.model.id == entity_id, *tombstone_filter(self.model, include_deleted))
        )
        return (self._db.scalar(query) or 0) > 0

    def find_active_conflict(
        self,
        values: Mapping[str, Any],
        exclude_id: int | None = None,
    ) -> tuple[str, ModelT] | None:
        """
        Find an active entity sharing any uniqueness-bearing value.

        Returns the colliding field and the entity holding it, or None.
        """
        candidates = {
            name: values[name]
            for name in self.unique_fields
            if values.get(name) is not None
        }
        if not candidates:
            return None

        query = select(self.model).where(
            self.model.deleted_at.is_(None),
            or_(*(getattr(self.model, name) == value for name, value in candidates.items())),
        )
        if exclude_id is not None:
            query = query.where(self.model.id != exclude_id)

        holder = self._db.scalar(query.order_by(self.model.id).limit(1))
        if holder is None:
            return None

        field = next(name for name, value in candidates.items() if getattr(holder, name) == value)
        return field, holder

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def create(self, values: Mapping[str, Any]) -> ModelT:
        """
        Insert a new active entity.

        Raises:
            ConflictError: an active entity already holds a unique value
            DatabaseError: any other store failure
        """
        self._raise_on_conflict(values, exclude_id=None, operation="create")

        entity = self.model(**values)
        self._db.add(entity)
        self._commit("create")
        self._db.refresh(entity)

        return entity

    def update(self, entity_id: int, values: Mapping[str, Any]) -> ModelT | None:
        """
        Apply ``values`` to an active entity.

        Returns None when no active entity has this id.

        Raises:
            ConflictError: another active entity already holds a unique value
            DatabaseError: any other store failure
        """
        entity = self.find_by_id(entity_id)
        if entity is None:
            return None

        changed = {
            name: value
            for name, value in values.items()
            if name in self.unique_fields and getattr(entity, name) != value
        }
        self._raise_on_conflict(changed, exclude_id=entity_id, operation="update")

        for name, value in values.items():
            setattr(entity, name, value)
        self._commit("update", entity_id)
        self._db.refresh(entity)
        return entity

    def soft_delete(self, entity_id: int) -> ModelT | None:
        """
        Tombstone an active entity and return it.

        Returns None when no active entity has this id.
        """
        entity = self.find_by_id(entity_id)
        if entity is None:
            return None

        entity.soft_delete()
        self._commit("soft_delete", entity_id)
        self._db.refresh(entity)

        return entity

    def restore(self, entity_id: int) -> ModelT | None:
        """
        Bring a tombstoned entity back.

        Returns None when there is no tombstoned entity with this id, which
        includes already-active ones. Only the tombstone is cleared; the
        entity keeps the values it had when it was deleted.

        Raises:
            ConflictError: an active entity now holds one of its unique
                values; the tombstone is left in place
        """
        entity = self.find_deleted_by_id(entity_id)
        if entity is None:
            return None

        values = {name: getattr(entity, name) for name in self.unique_fields}
        conflict = self.find_active_conflict(values, exclude_id=entity_id)
        if conflict is not None:
            field, holder = conflict
            raise ConflictError(
                f"Cannot restore {self.entity_name.lower()}: another active "
                f"{self.entity_name.lower()} already uses this {field}",
                field=field,
                entity=self.entity_name,
                entity_id=entity_id,
                conflicting_id=holder.id,
            )

        entity.restore()
        self._commit("restore", entity_id)
        self._db.refresh(entity)

        return entity

    # =========================================================================
    # Helpers
    # =========================================================================

    def _raise_on_conflict(
        self,
        values: Mapping[str, Any],
        exclude_id: int | None,
        operation: str,
    ) -> None:
        conflict = self.find_active_conflict(values, exclude_id=exclude_id)
        if conflict is None:
            return
        field, holder = conflict
        raise ConflictError(
            f"Another active {self.entity_name.lower()} already uses this {field}",
            field=field,
            entity=self.entity_name,
            entity_id=exclude_id,
            conflicting_id=holder.id,
            operation=operation,
        )

    def _commit(self, operation: str, entity_id: int | None = None) -> None:
        """
        Commit, translating store failures.

        A uniqueness violation caught only by the database (a concurrent
        writer won the race) still surfaces as ConflictError.
        """
        try:
            safe_commit(self._db)
        except IntegrityError as exc:
            field = self._violated_field(exc)
            if field is None and "unique" not in str(exc.orig).lower():
                raise DatabaseError(
                    operation, entity=self.entity_name, entity_id=entity_id, error=str(exc.orig)
                ) from exc
            raise ConflictError(
                f"Another active {self.entity_name.lower()} already uses this {field or 'value'}",
                field=field,
                entity=self.entity_name,
                entity_id=entity_id,
                operation=operation,
            ) from exc
        except SQLAlchemyError as exc:
            raise DatabaseError(
                operation, entity=self.entity_name, entity_id=entity_id, error=str(exc)
            ) from exc

    def _violated_field(self, exc: IntegrityError) -> str | None:
        """
        Map a uniqueness violation back to the field name.

        PostgreSQL names the index (uq_product_slug_active); SQLite names
        the column (product.slug).
        """
        message = str(exc.orig).lower()
        table = self.model.__tablename__
        for name in self.unique_fields:
            if f"uq_{table}_{name}_active" in message or f"{table}.{name}" in message:
                return name
        return None
