"""
Pytest fixtures for stock ledger backend tests.

Provides test database setup, users with both roles, catalog rows and test client.
"""

from decimal import Decimal

import pytest

from stockledger import create_app
from stockledger.config import TestingConfig
from stockledger.extensions import db
from stockledger.models import Category, Product, Supplier
from stockledger.services.token_service import get_signer
from stockledger.services.user_service import register_user


TEST_PASSWORD = "Password123!"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TestingConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def admin_user(db_session):
    return register_user(
        name="Ada Admin",
        email="admin@example.com",
        password=TEST_PASSWORD,
        phone_number="555-0100",
        role="ADMIN",
    )


@pytest.fixture(scope='function')
def manager_user(db_session):
    return register_user(
        name="Max Manager",
        email="manager@example.com",
        password=TEST_PASSWORD,
        phone_number="555-0101",
    )


@pytest.fixture(scope='function')
def category(db_session):
    cat = Category(name="Beverages")
    db_session.add(cat)
    db_session.commit()
    return cat


@pytest.fixture(scope='function')
def supplier(db_session):
    sup = Supplier(name="Acme Wholesale", address="1 Dock Road")
    db_session.add(sup)
    db_session.commit()
    return sup


@pytest.fixture(scope='function')
def product(db_session, category):
    """Product with price 2.50 and 10 units on hand."""
    prod = Product(
        sku="BEV-001",
        name="Sparkling Water",
        description="500ml bottle",
        price=Decimal("2.50"),
        stock_quantity=10,
        category_id=category.id,
    )
    db_session.add(prod)
    db_session.commit()
    return prod


def auth_headers(token: str) -> dict:
    """Create authorization headers with token."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def admin_headers(admin_user):
    return auth_headers(get_signer().issue(admin_user.email))


@pytest.fixture(scope='function')
def manager_headers(manager_user):
    return auth_headers(get_signer().issue(manager_user.email))
