"""
User Repository - Data access for user accounts.
"""

from dataclasses import dataclass

from sqlalchemy import ColumnElement
from sqlalchemy.orm import Session

from shared.config.constants import PageSizes, SortFields
from storefront.models import User

from .base import RepositoryFilters, SoftDeleteRepository, partial_match


@dataclass(frozen=True)
class UserFilters(RepositoryFilters):
    """Filters specific to users. Name and email are partial matches."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None


class UserRepository(SoftDeleteRepository[User]):
    """Repository for User entities. Email is unique among active users."""

    entity_name = "User"
    unique_fields = ("email",)
    page_sizes = PageSizes.USERS
    sort_fields = SortFields.USERS

    @property
    def model(self) -> type[User]:
        return User

    def _entity_predicates(self, filters: RepositoryFilters) -> list[ColumnElement[bool]]:
        if not isinstance(filters, UserFilters):
            return []

        matches = [
            partial_match(User.first_name, filters.first_name),
            partial_match(User.last_name, filters.last_name),
            partial_match(User.email, filters.email),
        ]
        return [match for match in matches if match is not None]

    def find_by_email(self, email: str, include_deleted: bool = False) -> User | None:
        return self.find_one_by(include_deleted=include_deleted, email=email.strip().lower())


def get_user_repository(db: Session) -> UserRepository:
    """Factory function to create UserRepository."""
    return UserRepository(db)
