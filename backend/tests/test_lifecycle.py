"""
Soft delete and restore across products, categories and users.
"""

import pytest

from shared.utils.exceptions import ConflictError, NotFoundError
from storefront.models import Product
from storefront.repositories import ProductFilters, ProductRepository, UserFilters


class TestProductRestoreScenario:
    """A deleted product whose name was reused cannot come back."""

    def test_name_is_free_after_delete(self, product_service, product_payload, admin):
        first = product_service.create(product_payload("Chair", 10), admin)
        product_service.delete(first.id, admin)

        second = product_service.create(product_payload("Chair", 15), admin)

        assert second.id != first.id
        assert second.slug == "chair"

    def test_restore_conflicts_with_active_holder(self, product_service, product_payload, admin):
        first = product_service.create(product_payload("Chair", 10), admin)
        product_service.delete(first.id, admin)
        second = product_service.create(product_payload("Chair", 15), admin)

        with pytest.raises(ConflictError) as exc_info:
            product_service.restore(first.id, admin)

        assert exc_info.value.status_code == 409
        assert exc_info.value.field in {"name", "slug"}

        still_deleted = product_service.get_by_id(first.id, admin, include_deleted=True)
        assert still_deleted.deleted_at is not None
        holder = product_service.get_by_id(second.id, admin)
        assert holder.is_active
        assert holder.price == 15

    def test_restore_after_holder_is_deleted(self, product_service, product_payload, admin):
        first = product_service.create(product_payload("Chair", 10), admin)
        product_service.delete(first.id, admin)
        second = product_service.create(product_payload("Chair", 15), admin)
        product_service.delete(second.id, admin)

        restored = product_service.restore(first.id, admin)

        assert restored.is_active
        assert restored.price == 10

    def test_slug_collision_is_reported_on_slug(self, product_service, product_payload, admin):
        first = product_service.create(product_payload("Oak Table"), admin)
        product_service.delete(first.id, admin)
        product_service.create(product_payload("oak-table"), admin)

        with pytest.raises(ConflictError) as exc_info:
            product_service.restore(first.id, admin)

        assert exc_info.value.field == "slug"


class TestUserRestoreScenario:
    """A deleted account whose email was re-registered cannot come back."""

    def test_reregistered_email_blocks_restore(self, user_service, registration, admin):
        original = user_service.register_user(registration("a@b.com"))
        user_service.delete_user(original.id, admin)

        replacement = user_service.register_user(registration("a@b.com"))
        assert replacement.id != original.id

        with pytest.raises(ConflictError) as exc_info:
            user_service.restore_user(original.id, admin)

        assert exc_info.value.field == "email"
        assert user_service.get_user_by_id(original.id, admin).deleted_at is not None
        assert user_service.get_user_by_id(replacement.id, admin).is_active

    def test_restore_without_collider(self, user_service, registration, admin):
        """A lone tombstoned account restores and is visible to default filters again."""
        user = user_service.register_user(registration("x@y.com"))
        user_service.delete_user(user.id, admin)

        restored = user_service.restore_user(user.id, admin)

        assert restored.deleted_at is None
        page = user_service.list_users(UserFilters(email="x@y.com"), admin)
        assert [u.id for u in page.data] == [user.id]


class TestRestoreNoOps:
    def test_restore_active_returns_none(self, product_service, product_payload, admin):
        product = product_service.create(product_payload(), admin)

        assert product_service.restore(product.id, admin) is None
        assert product_service.get_by_id(product.id, admin).is_active

    def test_restore_unknown_id_returns_none(self, category_service, admin):
        assert category_service.restore(424242, admin) is None

    def test_restore_keeps_values(self, category_service, admin):
        category = category_service.create(
            {"name": "Lamps", "description": "Desk and floor lamps"}, admin
        )
        category_service.delete(category.id, admin)

        restored = category_service.restore(category.id, admin)

        assert restored.name == "Lamps"
        assert restored.slug == "lamps"
        assert restored.description == "Desk and floor lamps"


class TestSoftDelete:
    def test_deleted_record_keeps_values(self, product_service, product_payload, admin, db_session):
        product = product_service.create(product_payload("Stool", 25), admin)

        product_service.delete(product.id, admin)

        stored = db_session.get(Product, product.id)
        assert stored.name == "Stool"
        assert stored.price == 25
        assert stored.deleted_at is not None
        assert not stored.is_active

    def test_deleted_record_hidden_by_default(self, product_service, product_payload, admin):
        product = product_service.create(product_payload(), admin)
        product_service.delete(product.id, admin)

        assert product_service.get_by_id(product.id, admin) is None
        assert product_service.list_products(ProductFilters(), admin).total_count == 0

    def test_delete_twice_is_not_found(self, product_service, product_payload, admin):
        product = product_service.create(product_payload(), admin)
        product_service.delete(product.id, admin)

        with pytest.raises(NotFoundError):
            product_service.delete(product.id, admin)

    def test_many_tombstones_share_a_name(self, product_service, product_payload, admin):
        for price in (10, 11, 12):
            product = product_service.create(product_payload("Bench", price), admin)
            product_service.delete(product.id, admin)

        page = product_service.list_products(ProductFilters(include_deleted=True), admin)
        assert page.total_count == 3


class TestCategoryDeleteGuard:
    def test_assigned_product_blocks_delete(
        self, category_service, product_service, product_payload, seed_category, admin
    ):
        product_service.create(product_payload(category_id=seed_category.id), admin)

        with pytest.raises(ConflictError):
            category_service.delete(seed_category.id, admin)

        assert category_service.get_by_id(seed_category.id, admin).is_active

    def test_deleted_product_still_blocks_delete(
        self, category_service, product_service, product_payload, seed_category, admin
    ):
        product = product_service.create(product_payload(category_id=seed_category.id), admin)
        product_service.delete(product.id, admin)

        with pytest.raises(ConflictError):
            category_service.delete(seed_category.id, admin)

    def test_delete_after_reassignment(
        self, category_service, product_service, product_payload, seed_category, admin
    ):
        other = category_service.create({"name": "Outdoor"}, admin)
        product = product_service.create(product_payload(category_id=seed_category.id), admin)
        product_service.update(product.id, {"category_id": other.id}, admin)

        deleted = category_service.delete(seed_category.id, admin)

        assert deleted.deleted_at is not None


class TestStoreBackstop:
    """The database index still reports conflicts the pre-check missed."""

    def test_integrity_error_maps_to_conflict(self, db_session, monkeypatch):
        repo = ProductRepository(db_session)
        repo.create({"name": "Desk", "slug": "desk", "price": 99, "category_id": 1})
        monkeypatch.setattr(repo, "find_active_conflict", lambda values, exclude_id=None: None)

        with pytest.raises(ConflictError) as exc_info:
            repo.create({"name": "Desk", "slug": "desk-2", "price": 50, "category_id": 1})

        assert exc_info.value.field == "name"
        assert repo.count(ProductFilters()) == 1

    def test_restore_race_maps_to_conflict(self, db_session, monkeypatch):
        repo = ProductRepository(db_session)
        first = repo.create({"name": "Desk", "slug": "desk", "price": 99, "category_id": 1})
        repo.soft_delete(first.id)
        repo.create({"name": "Desk", "slug": "desk", "price": 50, "category_id": 1})
        monkeypatch.setattr(repo, "find_active_conflict", lambda values, exclude_id=None: None)

        with pytest.raises(ConflictError):
            repo.restore(first.id)

        assert repo.find_deleted_by_id(first.id) is not None
