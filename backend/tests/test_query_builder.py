"""
Filter compilation: tombstone handling, partial matches, ranges, sorting.
"""

import dataclasses

import pytest

from storefront.repositories import (
    CategoryFilters,
    CategoryRepository,
    ProductFilters,
    ProductRepository,
    UserFilters,
    UserRepository,
)


def _sql(predicates):
    return [str(p) for p in predicates]


class TestTombstonePredicate:
    @pytest.mark.parametrize("include_deleted", [None, False])
    def test_excludes_deleted_unless_asked(self, db_session, include_deleted):
        repo = ProductRepository(db_session)

        predicates = repo.generate_query(ProductFilters(include_deleted=include_deleted))

        assert _sql(predicates) == ["product.deleted_at IS NULL"]

    def test_include_deleted_true_drops_predicate(self, db_session):
        repo = ProductRepository(db_session)

        assert repo.generate_query(ProductFilters(include_deleted=True)) == []

    def test_other_filter_types_contribute_nothing(self, db_session):
        """A filter object of another entity only yields the tombstone predicate."""
        repo = ProductRepository(db_session)

        predicates = repo.generate_query(UserFilters(email="a@b.com"))

        assert len(predicates) == 1


class TestFiltersAreImmutable:
    def test_cannot_assign(self):
        filters = ProductFilters(name="chair")

        with pytest.raises(dataclasses.FrozenInstanceError):
            filters.include_deleted = True  # type: ignore[misc]

    def test_generate_query_leaves_input_alone(self, db_session):
        filters = ProductFilters(name="  chair  ", include_deleted=None)

        ProductRepository(db_session).generate_query(filters)

        assert filters.name == "  chair  "
        assert filters.include_deleted is None


class TestProductFilters:
    @pytest.fixture
    def repo(self, db_session):
        repo = ProductRepository(db_session)
        repo.create({"name": "Red Chair", "slug": "red-chair", "price": 10, "stock": 0, "category_id": 1})
        repo.create({"name": "Blue Chair", "slug": "blue-chair", "price": 20, "stock": 3, "category_id": 1})
        repo.create({"name": "Table", "slug": "table", "price": 30, "stock": 1, "category_id": 2})
        repo.create({"name": "100% Wool Rug", "slug": "100-wool-rug", "price": 40, "stock": 2, "category_id": 3})
        return repo

    def _names(self, repo, **criteria):
        page = repo.find_all(ProductFilters(sort_by="name", sort_order="asc", **criteria))
        return [row.name for row in page.data]

    def test_name_is_case_insensitive_substring(self, repo):
        assert self._names(repo, name="CHAIR") == ["Blue Chair", "Red Chair"]

    def test_name_wildcards_are_literal(self, repo):
        assert self._names(repo, name="%") == ["100% Wool Rug"]
        assert self._names(repo, name="_") == []

    def test_blank_name_matches_everything(self, repo):
        assert len(self._names(repo, name="   ")) == 4

    def test_price_bounds_are_inclusive(self, repo):
        assert self._names(repo, min_price=20, max_price=30) == ["Blue Chair", "Table"]

    def test_zero_is_a_valid_bound(self, repo):
        assert self._names(repo, max_price=0) == []

    def test_in_stock(self, repo):
        assert "Red Chair" not in self._names(repo, in_stock=True)
        assert len(self._names(repo, in_stock=False)) == 4

    def test_category(self, repo):
        assert self._names(repo, category_id=1) == ["Blue Chair", "Red Chair"]

    def test_criteria_are_anded(self, repo):
        assert self._names(repo, name="chair", in_stock=True, category_id=1) == ["Blue Chair"]


class TestCategoryFilters:
    @pytest.fixture
    def repo(self, db_session):
        repo = CategoryRepository(db_session)
        root = repo.create({"name": "Furniture", "slug": "furniture"})
        repo.create({"name": "Chairs", "slug": "chairs", "parent_id": root.id})
        repo.create({"name": "Lighting", "slug": "lighting"})
        return repo

    def test_root_only(self, repo):
        page = repo.find_all(CategoryFilters(root_only=True, sort_by="name", sort_order="asc"))

        assert [c.name for c in page.data] == ["Furniture", "Lighting"]

    def test_parent_id(self, repo):
        parent = repo.find_by_slug("furniture")

        page = repo.find_all(CategoryFilters(parent_id=parent.id))

        assert [c.name for c in page.data] == ["Chairs"]


class TestUserFilters:
    def test_partial_email_and_name(self, db_session):
        repo = UserRepository(db_session)
        repo.create({"email": "maria@shop.com", "first_name": "Maria"})
        repo.create({"email": "mario@shop.com", "first_name": "Mario"})
        repo.create({"email": "ann@other.com", "first_name": "Annie"})

        by_email = repo.find_all(UserFilters(email="@shop."))
        by_name = repo.find_all(UserFilters(first_name="mari", email="maria"))

        assert by_email.total_count == 2
        assert [u.email for u in by_name.data] == ["maria@shop.com"]


class TestSortClauses:
    def test_unknown_field_uses_creation_time(self, db_session):
        clauses = ProductRepository(db_session).order_by(ProductFilters(sort_by="password"))

        assert [str(c) for c in clauses] == ["product.created_at DESC", "product.id DESC"]

    def test_field_not_sortable_for_entity(self, db_session):
        """price sorts products but not categories."""
        clauses = CategoryRepository(db_session).order_by(CategoryFilters(sort_by="price"))

        assert str(clauses[0]) == "category.created_at DESC"
