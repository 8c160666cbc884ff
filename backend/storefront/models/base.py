"""
Base class and SoftDeleteMixin for all SQLAlchemy ORM models.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import BigInteger, DateTime, Index, Integer, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# BIGINT ids in PostgreSQL, INTEGER on SQLite so rowid autoincrement works
IdType = BigInteger().with_variant(Integer(), "sqlite")

ACTIVE_ONLY = "deleted_at IS NULL"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def active_unique_index(table: str, column: str) -> Index:
    """
    Unique index on ``column`` restricted to non-deleted rows.

    Tombstoned rows keep their values, so any number of them may share a
    name with each other and with one active row.
    """
    return Index(
        f"uq_{table}_{column}_active",
        column,
        unique=True,
        postgresql_where=text(ACTIVE_ONLY),
        sqlite_where=text(ACTIVE_ONLY),
    )


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class SoftDeleteMixin:
    """
    Mixin providing timestamps and a soft-delete tombstone.

    ``deleted_at`` is the only lifecycle state: NULL means active, any
    timestamp means tombstoned. ``is_active`` is derived from it.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None

    def soft_delete(self) -> None:
        """Tombstone the record. Values are kept for a later restore."""
        self.deleted_at = utcnow()

    def restore(self) -> None:
        self.deleted_at = None

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        id_val = getattr(self, "id", None)
        state = "active" if self.is_active else "deleted"
        return f"<{class_name}(id={id_val}, {state})>"
