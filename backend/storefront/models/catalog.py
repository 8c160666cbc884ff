"""
Catalog Models: Category, Product.
"""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import JSON, BigInteger, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdType, SoftDeleteMixin, active_unique_index


class Category(SoftDeleteMixin, Base):
    """
    Product category, optionally nested under a parent category.
    Name and slug are unique among active categories.
    """

    __tablename__ = "category"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(220), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    image: Mapped[Optional[str]] = mapped_column(Text)
    parent_id: Mapped[Optional[int]] = mapped_column(
        IdType, ForeignKey("category.id"), nullable=True, index=True
    )

    __table_args__ = (
        active_unique_index("category", "name"),
        active_unique_index("category", "slug"),
    )

    def __repr__(self) -> str:
        state = "active" if self.is_active else "deleted"
        return f"<Category(id={self.id}, slug='{self.slug}', {state})>"


class Product(SoftDeleteMixin, Base):
    """
    Sellable catalog item.

    ``category_id`` is a plain reference: products may point at a deleted
    category, which is what keeps such a category from being deleted while
    products still use it.
    """

    __tablename__ = "product"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(220), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    price: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)
    sale_price: Mapped[Optional[float]] = mapped_column(Numeric(12, 2, asdecimal=False))
    reviews_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reviews_sum: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # {"height", "width", "depth", "unit"}
    dimensions: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON)
    # {"value", "unit"}
    weight: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON)
    meta_title: Mapped[str] = mapped_column(String(70), nullable=False, default="")
    meta_description: Mapped[Optional[str]] = mapped_column(String(160))
    images: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    category_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)

    __table_args__ = (
        active_unique_index("product", "name"),
        active_unique_index("product", "slug"),
    )

    def __repr__(self) -> str:
        state = "active" if self.is_active else "deleted"
        return f"<Product(id={self.id}, slug='{self.slug}', {state})>"
