"""
Pagination for list queries.

Usage:
    page = PageRequest.create(filters.page_number, filters.entry_per_page, PageSizes.PRODUCTS)
    rows = db.scalars(query.offset(page.offset).limit(page.limit)).all()
    return PaginatedData.build(rows, total, page)
"""

from collections.abc import Callable, Collection, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from shared.utils.exceptions import ValidationError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class PageRequest:
    """
    A validated page position.

    Attributes:
        page_number: 1-indexed page
        entry_per_page: Page size, one of the listing's allowed sizes
    """

    page_number: int
    entry_per_page: int

    @classmethod
    def create(
        cls,
        page_number: int,
        entry_per_page: int,
        allowed_sizes: Collection[int],
    ) -> "PageRequest":
        """
        Validate the requested position.

        Raises:
            ValidationError: page_number below 1 or an unsupported page size
        """
        errors = []
        if page_number < 1:
            errors.append({"path": "page_number", "message": "must be at least 1"})
        if entry_per_page not in allowed_sizes:
            sizes = ", ".join(str(size) for size in sorted(allowed_sizes))
            errors.append({"path": "entry_per_page", "message": f"must be one of {sizes}"})
        if errors:
            raise ValidationError(errors)
        return cls(page_number=page_number, entry_per_page=entry_per_page)

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.entry_per_page

    @property
    def limit(self) -> int:
        return self.entry_per_page


@dataclass(frozen=True)
class PaginatedData(Generic[T]):
    """
    One page of results plus navigation flags.

    ``has_next`` is true when records exist past this page; ``has_prev``
    when this is not the first page. ``total_count`` is the number of
    records matching the filter across all pages.
    """

    data: list[T]
    has_next: bool
    has_prev: bool
    shown_entry_count: int
    total_count: int
    page_number: int

    @classmethod
    def build(cls, rows: Sequence[T], total_count: int, page: PageRequest) -> "PaginatedData[T]":
        data = list(rows)
        return cls(
            data=data,
            has_next=page.offset + len(data) < total_count,
            has_prev=page.page_number > 1,
            shown_entry_count=len(data),
            total_count=total_count,
            page_number=page.page_number,
        )

    def map(self, fn: Callable[[T], U]) -> "PaginatedData[U]":
        """Convert every row, keeping the navigation metadata."""
        return PaginatedData(
            data=[fn(row) for row in self.data],
            has_next=self.has_next,
            has_prev=self.has_prev,
            shown_entry_count=self.shown_entry_count,
            total_count=self.total_count,
            page_number=self.page_number,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to response dictionary."""
        return {
            "data": self.data,
            "has_next": self.has_next,
            "has_prev": self.has_prev,
            "shown_entry_count": self.shown_entry_count,
            "total_count": self.total_count,
            "page_number": self.page_number,
        }
