"""
User Service - account registration and self-service.

Every operation except registration is checked against the authorization
gate with the target account's id, so ownership rules apply.

Usage:
    from storefront.services.domain import UserService

    service = UserService(db)
    user = service.register_user({"email": ..., "password": ..., "confirm_password": ...})
    service.change_password(user.id, {...}, ActingUser(id=user.id))
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel
from sqlalchemy.orm import Session

from shared.config.logging import audit_password_changed, get_logger, mask_email
from shared.security.password import hash_password, verify_password
from shared.utils.exceptions import NotFoundError, UnauthorizedError
from shared.utils.schemas import (
    ChangePasswordInput,
    RegisterUserInput,
    UpdateUserInput,
    UserOutput,
)
from shared.utils.validators import set_fields, validate_input
from storefront.models import User
from storefront.repositories import PaginatedData, UserFilters, UserRepository, get_user_repository
from storefront.services.base_service import visible_filters
from storefront.services.permissions import ActingUser, Action, PermissionContext, Resource

logger = get_logger(__name__)


class UserService:
    """
    Service for user accounts.

    Business rules:
    - Email is unique among active accounts
    - Only the account owner may change its password
    - Profile reads, updates and deletes are for the owner or an administrator
    - Listing, email lookup and restore are for administrators
    """

    def __init__(self, db: Session):
        self._db = db
        self._repo = get_user_repository(db)

    @property
    def repo(self) -> UserRepository:
        return self._repo

    def to_output(self, user: User) -> UserOutput:
        return UserOutput.model_validate(user)

    # =========================================================================
    # Query Methods
    # =========================================================================

    def get_user_by_id(self, user_id: int, actor: ActingUser) -> UserOutput | None:
        """
        Get an account, or None when there is none. Administrators also see
        deleted accounts.

        Raises:
            UnauthorizedError: actor is neither the owner nor an administrator
        """
        ctx = PermissionContext(actor)
        ctx.require(Action.READ, Resource.USER, target_id=user_id)

        user = self._repo.find_by_id(user_id, include_deleted=ctx.is_admin)
        return self.to_output(user) if user is not None else None

    def find_user_by_email(self, email: str, actor: ActingUser) -> UserOutput | None:
        """
        Administrator lookup by email, deleted accounts included. An active
        account wins over deleted ones with the same email.
        """
        PermissionContext(actor).require(Action.FIND_BY_EMAIL, Resource.USER)

        user = self._repo.find_by_email(email, include_deleted=True)
        return self.to_output(user) if user is not None else None

    def list_users(self, filters: UserFilters, actor: ActingUser) -> PaginatedData[UserOutput]:
        ctx = PermissionContext(actor)
        ctx.require(Action.LIST, Resource.USER)

        page = self._repo.find_all(visible_filters(filters, ctx))
        return page.map(self.to_output)

    # =========================================================================
    # Command Methods
    # =========================================================================

    def register_user(self, data: Mapping[str, Any] | BaseModel) -> UserOutput:
        """
        Create an account. Open to guests.

        Raises:
            ValidationError: invalid input or password policy violation
            ConflictError: an active account already uses the email
        """
        payload = validate_input(RegisterUserInput, data)

        values: dict[str, Any] = {
            "email": payload.email,
            "provider": payload.provider,
            "first_name": payload.first_name,
            "last_name": payload.last_name,
            "password": hash_password(payload.password) if payload.password else None,
        }

        user = self._repo.create(values)
        logger.info("User registered", user_id=user.id, email=mask_email(user.email))
        return self.to_output(user)

    def update_user(
        self,
        user_id: int,
        data: Mapping[str, Any] | BaseModel,
        actor: ActingUser,
    ) -> UserOutput:
        """
        Update profile fields of an active account.

        Raises:
            UnauthorizedError: actor is neither the owner nor an administrator
            ValidationError: invalid input
            NotFoundError: no active account with this id
            ConflictError: another active account uses the new email
        """
        PermissionContext(actor).require(Action.UPDATE, Resource.USER, target_id=user_id)

        patch = set_fields(validate_input(UpdateUserInput, data))
        if patch.get("email") is None:
            patch.pop("email", None)
        if patch.get("saved_addresses") is None:
            patch.pop("saved_addresses", None)

        user = self._repo.update(user_id, patch)
        if user is None:
            raise NotFoundError("User", user_id)

        logger.info("User updated", user_id=user_id, actor_id=actor.id, fields=sorted(patch))
        return self.to_output(user)

    def change_password(
        self,
        user_id: int,
        data: Mapping[str, Any] | BaseModel,
        actor: ActingUser,
    ) -> UserOutput:
        """
        Replace the account's password. Only the owner may do this, and
        only with the current password.

        Raises:
            UnauthorizedError: actor is not the owner, or the old password is wrong
            ValidationError: policy violation or mismatched confirmation
            NotFoundError: no active account with this id
        """
        PermissionContext(actor).require(Action.CHANGE_PASSWORD, Resource.USER, target_id=user_id)

        payload = validate_input(ChangePasswordInput, data)

        user = self._repo.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)

        if not verify_password(payload.old_password, user.password):
            raise UnauthorizedError(
                reason="Current password is incorrect",
                actor_id=actor.id,
                target_id=user_id,
            )

        updated = self._repo.update(user_id, {"password": hash_password(payload.new_password)})
        if updated is None:
            raise NotFoundError("User", user_id)

        audit_password_changed(user_id, changed_by=actor.id)
        return self.to_output(updated)

    def delete_user(self, user_id: int, actor: ActingUser) -> UserOutput:
        """
        Soft delete an account. Its email becomes free for a new account.

        Raises:
            UnauthorizedError: actor is neither the owner nor an administrator
            NotFoundError: no active account with this id
        """
        PermissionContext(actor).require(Action.DELETE, Resource.USER, target_id=user_id)

        user = self._repo.soft_delete(user_id)
        if user is None:
            raise NotFoundError("User", user_id)

        logger.info("User soft deleted", user_id=user_id, actor_id=actor.id)
        return self.to_output(user)

    def restore_user(self, user_id: int, actor: ActingUser) -> UserOutput | None:
        """
        Restore a deleted account, or None when there is no deleted account
        with this id.

        Raises:
            UnauthorizedError: actor is not an administrator
            ConflictError: an active account now uses the email
        """
        PermissionContext(actor).require(Action.RESTORE, Resource.USER, target_id=user_id)

        user = self._repo.restore(user_id)
        if user is None:
            return None

        logger.info("User restored", user_id=user_id, actor_id=actor.id)
        return self.to_output(user)
