"""
Jersey Catalog API - pytest Configuration and Fixtures

Provides shared test fixtures for:
- A fake catalog connection and an introspector with a private cache
- A seeded SQLite database whose tables match the catalog rows
- A Flask app wired to both, plus logged-in clients per role

Test data lives in catalog_fixtures.py.
Note: MySQL fixtures are in tests/integration/conftest.py
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from catalog_fixtures import (
    FakeCatalog, create_schema, install_sqlite_transactions, login,
)
from database.schema.introspector import SchemaIntrospector
from utils.cache import MetadataCache


# ============================================================================
# Schema Catalog
# ============================================================================

@pytest.fixture
def fake_catalog():
    return FakeCatalog()


@pytest.fixture
def introspector(fake_catalog):
    """Introspector over the fake catalog with its own cache."""
    return SchemaIntrospector(
        connect=fake_catalog.connect,
        database_name='jersey_catalog_test',
        cache=MetadataCache(),
    )


# ============================================================================
# SQLite Database
# ============================================================================

@pytest.fixture
def sqlite_engine():
    """Fresh in-memory database, seeded, shared by every connection of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    install_sqlite_transactions(engine)
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sqlite_connection(sqlite_engine):
    connection = sqlite_engine.connect()
    try:
        yield connection
    finally:
        connection.close()


# ============================================================================
# Flask App
# ============================================================================

@pytest.fixture
def app(sqlite_engine, introspector, monkeypatch):
    """
    Flask app whose request connections hit the SQLite database and whose
    schema comes from the fake catalog.
    """
    import database.connection as connection_module
    import database.schema.introspector as introspector_module
    from api.app import create_app

    monkeypatch.setattr(connection_module.db, '_engine', sqlite_engine)
    monkeypatch.setattr(introspector_module, '_default_introspector', introspector)

    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret-key',
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(client):
    login(client, 'admin@example.com')
    return client


@pytest.fixture
def editor_client(client):
    login(client, 'editor@example.com')
    return client


@pytest.fixture
def customer_client(client):
    login(client, 'client@example.com')
    return client
