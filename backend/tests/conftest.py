"""
Pytest configuration and fixtures for backend tests.
"""

import os

# Cheap hashes for tests; must be set before shared.config.settings loads
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ENVIRONMENT", "test")

from contextlib import contextmanager

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.models import Base
from storefront.services.domain import CategoryService, ProductService, UserService
from storefront.services.permissions import ActingUser


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "Secret#123"


@contextmanager
def _fresh_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    with _fresh_session() as session:
        yield session


@pytest.fixture
def session_factory():
    """
    Context manager producing an isolated session, for tests that need
    several clean databases (hypothesis examples).
    """
    return _fresh_session


# =============================================================================
# Actors
# =============================================================================


@pytest.fixture
def admin():
    return ActingUser(id=900_001, is_admin=True)


@pytest.fixture
def guest():
    return ActingUser.guest()


@pytest.fixture
def shopper(registered_user):
    """The registered user acting on their own behalf."""
    return ActingUser(id=registered_user.id)


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def user_service(db_session):
    return UserService(db_session)


@pytest.fixture
def category_service(db_session):
    return CategoryService(db_session)


@pytest.fixture
def product_service(db_session):
    return ProductService(db_session)


# =============================================================================
# Seed data
# =============================================================================


@pytest.fixture
def registration():
    """Build a valid registration payload."""

    def _build(email: str = "shopper@example.com", **overrides):
        payload = {
            "email": email,
            "password": PASSWORD,
            "confirm_password": PASSWORD,
        }
        payload.update(overrides)
        return payload

    return _build


@pytest.fixture
def registered_user(user_service, registration):
    return user_service.register_user(registration())


@pytest.fixture
def product_payload(seed_category):
    """Build a valid product payload in the seeded category."""

    def _build(name: str = "Chair", price: float = 10, **overrides):
        payload = {
            "name": name,
            "price": price,
            "stock": 5,
            "description": f"A {name.lower()}",
            "meta_title": name,
            "category_id": seed_category.id,
        }
        payload.update(overrides)
        return payload

    return _build


@pytest.fixture
def seed_category(category_service, admin):
    return category_service.create({"name": "Furniture"}, admin)
