"""
Shared Pydantic schemas: service inputs and output DTOs.

Inputs forbid unknown fields, so server-managed columns (slug, is_admin,
password hashes, tombstones) can never be set through them.
"""

import re
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from shared.config.constants import Limits, Providers
from shared.utils.validators import validate_image_url


# =============================================================================
# Common Types
# =============================================================================

Provider = Literal["credentials", "oauth"]
LengthUnit = Literal["cm", "m", "in"]
WeightUnit = Literal["g", "kg", "lb"]

_PASSWORD_RULES = (
    (re.compile(r"[A-Z]"), "must contain an uppercase letter"),
    (re.compile(r"[a-z]"), "must contain a lowercase letter"),
    (re.compile(r"[0-9]"), "must contain a digit"),
    (re.compile(r"[^A-Za-z0-9]"), "must contain a special character"),
)


def check_password_policy(password: str) -> str:
    """Raise ValueError unless the password satisfies the account policy."""
    if not Limits.MIN_PASSWORD_LENGTH <= len(password) <= Limits.MAX_PASSWORD_LENGTH:
        raise ValueError(
            f"must be {Limits.MIN_PASSWORD_LENGTH}-{Limits.MAX_PASSWORD_LENGTH} characters"
        )
    for pattern, message in _PASSWORD_RULES:
        if not pattern.search(password):
            raise ValueError(message)
    return password


def _normalize_email(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


def _clean_image_urls(urls: list[str]) -> list[str]:
    cleaned = [validate_image_url(url) for url in urls]
    return [url for url in cleaned if url]


class InputModel(BaseModel):
    """Base for service inputs."""

    model_config = {"extra": "forbid", "str_strip_whitespace": True}


# =============================================================================
# User Schemas
# =============================================================================


class AddressInput(InputModel):
    street: str = Field(min_length=1, max_length=200)
    city: str = Field(min_length=1, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    postal_code: str = Field(min_length=1, max_length=20)
    country: str = Field(min_length=2, max_length=100)
    is_default: bool = False


class RegisterUserInput(InputModel):
    """
    New account. Credentials accounts need a password and its confirmation;
    OAuth accounts have neither.
    """

    email: EmailStr
    password: str | None = None
    confirm_password: str | None = None
    provider: Provider = "credentials"
    first_name: str | None = Field(default=None, pattern=r"^[a-zA-Z]{4,10}$")
    last_name: str | None = Field(default=None, pattern=r"^[a-zA-Z]{4,20}$")

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: Any) -> Any:
        return _normalize_email(value)

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return check_password_policy(value)

    @model_validator(mode="after")
    def credentials_need_password(self) -> "RegisterUserInput":
        if self.provider == Providers.CREDENTIALS:
            if not self.password:
                raise ValueError("password is required for credentials accounts")
            if self.password != self.confirm_password:
                raise ValueError("passwords do not match")
        return self


class UpdateUserInput(InputModel):
    """Profile changes. Every field is optional; only given fields change."""

    email: EmailStr | None = None
    first_name: str | None = Field(default=None, pattern=r"^[a-zA-Z]{4,10}$")
    last_name: str | None = Field(default=None, pattern=r"^[a-zA-Z]{4,20}$")
    phone_number: str | None = Field(default=None, pattern=r"^\+?[0-9 ()\-]{7,20}$")
    saved_addresses: list[AddressInput] | None = Field(
        default=None, max_length=Limits.MAX_SAVED_ADDRESSES
    )

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: Any) -> Any:
        return _normalize_email(value)


class ChangePasswordInput(InputModel):
    old_password: str = Field(min_length=1)
    new_password: str
    confirm_password: str

    @field_validator("new_password")
    @classmethod
    def check_password(cls, value: str) -> str:
        return check_password_policy(value)

    @model_validator(mode="after")
    def check_password_pair(self) -> "ChangePasswordInput":
        if self.new_password != self.confirm_password:
            raise ValueError("passwords do not match")
        if self.new_password == self.old_password:
            raise ValueError("new password must differ from the old password")
        return self


class UserOutput(BaseModel):
    """User as returned to callers. Never carries the password hash."""

    model_config = {"from_attributes": True}

    id: int
    email: str
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    is_admin: bool
    email_verified: bool
    provider: str
    saved_addresses: list[dict[str, Any]] = []
    is_active: bool
    created_at: datetime
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


# =============================================================================
# Category Schemas
# =============================================================================


class CategoryCreate(InputModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(
        default=None, min_length=1, max_length=Limits.MAX_DESCRIPTION_LENGTH
    )
    image: str | None = None
    parent_id: int | None = Field(default=None, ge=1)

    @field_validator("image")
    @classmethod
    def check_image(cls, value: str | None) -> str | None:
        return validate_image_url(value)


class CategoryUpdate(CategoryCreate):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)


class CategoryOutput(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    slug: str
    description: str | None = None
    image: str | None = None
    parent_id: int | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


# =============================================================================
# Product Schemas
# =============================================================================


class Dimensions(InputModel):
    height: float = Field(gt=0)
    width: float = Field(gt=0)
    depth: float = Field(gt=0)
    unit: LengthUnit = "cm"


class Weight(InputModel):
    value: float = Field(gt=0)
    unit: WeightUnit = "kg"


class ProductCreate(InputModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str = Field(min_length=1, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    stock: int = Field(default=0, ge=0)
    price: float = Field(gt=0)
    sale_price: float | None = Field(default=None, gt=0)
    dimensions: Dimensions | None = None
    weight: Weight | None = None
    meta_title: str = Field(min_length=1, max_length=Limits.MAX_META_TITLE_LENGTH)
    meta_description: str | None = Field(
        default=None, max_length=Limits.MAX_META_DESCRIPTION_LENGTH
    )
    images: list[str] = Field(default_factory=list, max_length=Limits.MAX_PRODUCT_IMAGES)
    category_id: int = Field(ge=1)

    @field_validator("images")
    @classmethod
    def check_images(cls, value: list[str]) -> list[str]:
        return _clean_image_urls(value)


class ProductUpdate(ProductCreate):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(
        default=None, min_length=1, max_length=Limits.MAX_DESCRIPTION_LENGTH
    )
    stock: int | None = Field(default=None, ge=0)
    price: float | None = Field(default=None, gt=0)
    images: list[str] | None = Field(default=None, max_length=Limits.MAX_PRODUCT_IMAGES)
    meta_title: str | None = Field(
        default=None, min_length=1, max_length=Limits.MAX_META_TITLE_LENGTH
    )
    category_id: int | None = Field(default=None, ge=1)

    @field_validator("images")
    @classmethod
    def check_images(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return value
        return _clean_image_urls(value)


class ProductOutput(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    slug: str
    description: str
    stock: int
    price: float
    sale_price: float | None = None
    reviews_count: int = 0
    reviews_sum: int = 0
    dimensions: dict[str, Any] | None = None
    weight: dict[str, Any] | None = None
    meta_title: str = ""
    meta_description: str | None = None
    images: list[str] = []
    category_id: int
    is_active: bool
    created_at: datetime
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
