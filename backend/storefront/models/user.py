"""
User account model.
"""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import JSON, Boolean, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from shared.config.constants import Providers

from .base import Base, IdType, SoftDeleteMixin, active_unique_index


class User(SoftDeleteMixin, Base):
    """
    A shopper or administrator account.

    Email is unique among active accounts only; a deleted account's email
    can be registered again and then blocks the old account's restore.
    """

    __tablename__ = "app_user"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    # Stored lower-cased and trimmed
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    # Bcrypt hash; NULL for OAuth accounts
    password: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(50))
    last_name: Mapped[Optional[str]] = mapped_column(String(50))
    phone_number: Mapped[Optional[str]] = mapped_column(String(32))
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    email_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    provider: Mapped[str] = mapped_column(
        String(20), default=Providers.CREDENTIALS, nullable=False
    )
    saved_addresses: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, default=list, nullable=False
    )

    __table_args__ = (
        active_unique_index("app_user", "email"),
        Index("ix_app_user_email", "email"),
    )

    def __repr__(self) -> str:
        state = "active" if self.is_active else "deleted"
        return f"<User(id={self.id}, email='{self.email}', {state})>"
