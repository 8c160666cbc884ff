"""
User registration, profile management and password changes.
"""

import pytest

from shared.security.password import verify_password
from shared.utils.exceptions import (
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from storefront.models import User
from storefront.repositories import UserFilters
from storefront.services.permissions import ActingUser

PASSWORD = "Secret#123"
NEW_PASSWORD = "Fresh$456"


class TestRegisterUser:
    def test_register_hashes_password(self, user_service, registration, db_session):
        user = user_service.register_user(registration("New@Example.com "))

        stored = db_session.get(User, user.id)
        assert user.email == "new@example.com"
        assert stored.password != PASSWORD
        assert verify_password(PASSWORD, stored.password)

    def test_output_has_no_password(self, registered_user):
        assert "password" not in registered_user.model_dump()

    def test_duplicate_active_email(self, user_service, registration, registered_user):
        with pytest.raises(ConflictError) as exc_info:
            user_service.register_user(registration(registered_user.email.upper()))

        assert exc_info.value.field == "email"

    def test_mismatched_confirmation(self, user_service, registration):
        with pytest.raises(ValidationError):
            user_service.register_user(registration(confirm_password="Other#123"))

    @pytest.mark.parametrize(
        "password",
        ["Sh#1a", "alllowercase#1", "ALLUPPERCASE#1", "NoDigits#here", "NoSpecial123", "Way#Too#Long#Password1"],
    )
    def test_password_policy(self, user_service, registration, password):
        with pytest.raises(ValidationError) as exc_info:
            user_service.register_user(registration(password=password, confirm_password=password))

        assert exc_info.value.errors[0]["path"] == "password"

    def test_oauth_account_without_password(self, user_service, registration, db_session):
        user = user_service.register_user(
            registration("oauth@example.com", password=None, confirm_password=None, provider="oauth")
        )

        assert user.provider == "oauth"
        assert db_session.get(User, user.id).password is None

    def test_cannot_self_promote(self, user_service, registration):
        with pytest.raises(ValidationError) as exc_info:
            user_service.register_user(registration(is_admin=True))

        assert exc_info.value.errors[0]["path"] == "is_admin"


class TestReadUsers:
    def test_self_read(self, user_service, registered_user, shopper):
        assert user_service.get_user_by_id(registered_user.id, shopper).email == registered_user.email

    def test_stranger_read(self, user_service, registered_user):
        with pytest.raises(UnauthorizedError):
            user_service.get_user_by_id(registered_user.id, ActingUser(id=registered_user.id + 1))

    def test_missing_user_reads_as_none(self, user_service, admin):
        assert user_service.get_user_by_id(123456, admin) is None

    def test_find_by_email_admin_only(self, user_service, registered_user, shopper, admin):
        with pytest.raises(UnauthorizedError):
            user_service.find_user_by_email(registered_user.email, shopper)

        found = user_service.find_user_by_email(registered_user.email, admin)
        assert found.id == registered_user.id

    def test_find_by_email_prefers_active(self, user_service, registration, admin):
        old = user_service.register_user(registration("dup@example.com"))
        user_service.delete_user(old.id, admin)
        current = user_service.register_user(registration("dup@example.com"))

        assert user_service.find_user_by_email("DUP@example.com", admin).id == current.id

    def test_find_by_email_sees_deleted(self, user_service, registered_user, admin):
        user_service.delete_user(registered_user.id, admin)

        found = user_service.find_user_by_email(registered_user.email, admin)

        assert found.deleted_at is not None

    def test_list_users_admin_only(self, user_service, registered_user, shopper, admin):
        with pytest.raises(UnauthorizedError):
            user_service.list_users(UserFilters(), shopper)

        assert user_service.list_users(UserFilters(), admin).total_count == 1


class TestUpdateUser:
    def test_self_update(self, user_service, registered_user, shopper):
        updated = user_service.update_user(
            registered_user.id,
            {"first_name": "Maria", "phone_number": "+56 9 1234 5678"},
            shopper,
        )

        assert updated.first_name == "Maria"
        assert updated.phone_number == "+56 9 1234 5678"

    def test_saved_addresses(self, user_service, registered_user, shopper):
        address = {"street": "Main 1", "city": "Santiago", "postal_code": "8320000", "country": "CL"}

        updated = user_service.update_user(registered_user.id, {"saved_addresses": [address]}, shopper)

        assert updated.saved_addresses[0]["city"] == "Santiago"
        assert updated.saved_addresses[0]["is_default"] is False

    def test_invalid_name(self, user_service, registered_user, shopper):
        with pytest.raises(ValidationError) as exc_info:
            user_service.update_user(registered_user.id, {"first_name": "Al"}, shopper)

        assert exc_info.value.errors[0]["path"] == "first_name"

    def test_stranger_update(self, user_service, registered_user):
        with pytest.raises(UnauthorizedError):
            user_service.update_user(
                registered_user.id, {"first_name": "Maria"}, ActingUser(id=registered_user.id + 1)
            )

    def test_email_taken(self, user_service, registration, registered_user, shopper):
        user_service.register_user(registration("taken@example.com"))

        with pytest.raises(ConflictError):
            user_service.update_user(registered_user.id, {"email": "taken@example.com"}, shopper)

    def test_email_of_deleted_account_is_free(self, user_service, registration, registered_user, shopper, admin):
        other = user_service.register_user(registration("gone@example.com"))
        user_service.delete_user(other.id, admin)

        updated = user_service.update_user(registered_user.id, {"email": "gone@example.com"}, shopper)

        assert updated.email == "gone@example.com"

    def test_update_deleted_account(self, user_service, registered_user, admin):
        user_service.delete_user(registered_user.id, admin)

        with pytest.raises(NotFoundError):
            user_service.update_user(registered_user.id, {"first_name": "Maria"}, admin)


class TestChangePassword:
    def _payload(self, old=PASSWORD, new=NEW_PASSWORD, confirm=None):
        return {"old_password": old, "new_password": new, "confirm_password": confirm or new}

    def test_owner_changes_password(self, user_service, registered_user, shopper, db_session):
        user_service.change_password(registered_user.id, self._payload(), shopper)

        stored = db_session.get(User, registered_user.id)
        assert verify_password(NEW_PASSWORD, stored.password)
        assert not verify_password(PASSWORD, stored.password)

    def test_admin_cannot_change_others_password(self, user_service, registered_user, admin):
        with pytest.raises(UnauthorizedError):
            user_service.change_password(registered_user.id, self._payload(), admin)

    def test_wrong_old_password(self, user_service, registered_user, shopper):
        with pytest.raises(UnauthorizedError) as exc_info:
            user_service.change_password(registered_user.id, self._payload(old="Wrong#999"), shopper)

        assert exc_info.value.detail == "Current password is incorrect"

    def test_new_must_differ(self, user_service, registered_user, shopper):
        with pytest.raises(ValidationError):
            user_service.change_password(registered_user.id, self._payload(new=PASSWORD), shopper)

    def test_confirmation_must_match(self, user_service, registered_user, shopper):
        with pytest.raises(ValidationError):
            user_service.change_password(
                registered_user.id, self._payload(confirm="Other$456"), shopper
            )

    def test_oauth_account_has_no_password_to_verify(self, user_service, registration):
        user = user_service.register_user(
            registration("oauth@example.com", password=None, confirm_password=None, provider="oauth")
        )

        with pytest.raises(UnauthorizedError):
            user_service.change_password(user.id, self._payload(), ActingUser(id=user.id))


class TestDeleteAndRestoreUser:
    def test_self_delete(self, user_service, registered_user, shopper):
        deleted = user_service.delete_user(registered_user.id, shopper)

        assert deleted.deleted_at is not None

    def test_stranger_delete(self, user_service, registered_user):
        with pytest.raises(UnauthorizedError):
            user_service.delete_user(registered_user.id, ActingUser(id=registered_user.id + 1))

    def test_restore_requires_admin(self, user_service, registered_user, shopper, admin):
        user_service.delete_user(registered_user.id, admin)

        with pytest.raises(UnauthorizedError):
            user_service.restore_user(registered_user.id, shopper)

    def test_restore_active_is_noop(self, user_service, registered_user, admin):
        assert user_service.restore_user(registered_user.id, admin) is None
