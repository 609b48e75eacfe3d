"""
Integration test fixtures and configuration.

Provides MySQL database fixtures for integration testing.

Fixture Types:
- mysql_engine: Engine on a dedicated test database
- mysql_with_schema: Catalog tables created for one test, dropped afterwards
- mysql_connection: Connection inside a transaction that is rolled back
- mysql_introspector: SchemaIntrospector reading the test database catalog

Safety Features:
- Blocks running tests against production/dev databases
- Skips when the TEST_DB_* environment variables are missing
"""

import os

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL

from database.schema.introspector import SchemaIntrospector
from utils.cache import MetadataCache


# =============================================================================
# Safety Constants
# =============================================================================

# Database names that should NEVER be used for automated tests
PROTECTED_DATABASE_NAMES = [
    'jersey_catalog',       # Production
    'jersey_catalog_dev',   # Development
    'jersey_catalog_prod',  # Production alias
]

# Creation order; dropped in reverse
MYSQL_DDL = [
    """
    CREATE TABLE clients (
        id INT AUTO_INCREMENT PRIMARY KEY,
        trade_name VARCHAR(150) NOT NULL,
        tax_id VARCHAR(30) NOT NULL UNIQUE,
        address VARCHAR(255) NULL,
        contact_name VARCHAR(120) NULL,
        contact_email VARCHAR(120) NULL,
        discount_percentage DECIMAL(5, 2) NOT NULL DEFAULT 0.00,
        category ENUM('Regular', 'Preferred') NOT NULL DEFAULT 'Regular'
    ) ENGINE=InnoDB
    """,
    """
    CREATE TABLE users (
        id INT AUTO_INCREMENT PRIMARY KEY,
        first_name VARCHAR(100) NOT NULL,
        last_name VARCHAR(100) NOT NULL,
        email VARCHAR(150) NOT NULL UNIQUE,
        password VARCHAR(255) NOT NULL,
        role_id INT NOT NULL,
        active TINYINT(1) NOT NULL DEFAULT 1,
        client_id INT NULL,
        birth_date DATE NULL,
        registered_at TIMESTAMP NULL DEFAULT CURRENT_TIMESTAMP,
        CONSTRAINT fk_users_client FOREIGN KEY (client_id) REFERENCES clients (id)
    ) ENGINE=InnoDB
    """,
    """
    CREATE TABLE products (
        id INT AUTO_INCREMENT PRIMARY KEY,
        title VARCHAR(200) NOT NULL,
        club VARCHAR(150) NULL,
        country VARCHAR(80) NULL,
        type VARCHAR(80) NULL,
        color VARCHAR(120) NULL,
        price DECIMAL(10, 2) NOT NULL,
        offer_price DECIMAL(10, 2) NULL,
        sku VARCHAR(80) NOT NULL UNIQUE,
        category_id INT NULL
    ) ENGINE=InnoDB
    """,
    """
    CREATE TABLE sizes (
        id INT AUTO_INCREMENT PRIMARY KEY,
        label VARCHAR(20) NOT NULL UNIQUE
    ) ENGINE=InnoDB
    """,
    """
    CREATE TABLE product_size_stock (
        product_id INT NOT NULL,
        size_id INT NOT NULL,
        stock INT NOT NULL DEFAULT 0,
        PRIMARY KEY (product_id, size_id),
        CONSTRAINT fk_stock_product FOREIGN KEY (product_id) REFERENCES products (id),
        CONSTRAINT fk_stock_size FOREIGN KEY (size_id) REFERENCES sizes (id)
    ) ENGINE=InnoDB
    """,
    """
    CREATE TABLE reservations (
        id INT AUTO_INCREMENT PRIMARY KEY,
        client_id INT NOT NULL,
        CONSTRAINT fk_reservations_client FOREIGN KEY (client_id) REFERENCES clients (id)
    ) ENGINE=InnoDB
    """,
    """
    CREATE TABLE reservation_notes (
        id INT AUTO_INCREMENT PRIMARY KEY,
        reservation_id INT NOT NULL,
        author_id INT NULL,
        reviewer_id INT NULL,
        note VARCHAR(255) NOT NULL,
        CONSTRAINT fk_notes_reservation FOREIGN KEY (reservation_id) REFERENCES reservations (id),
        CONSTRAINT fk_notes_author FOREIGN KEY (author_id) REFERENCES users (id),
        CONSTRAINT fk_notes_reviewer FOREIGN KEY (reviewer_id) REFERENCES users (id)
    ) ENGINE=InnoDB
    """,
]

MYSQL_TABLES = [
    'clients', 'users', 'products', 'sizes', 'product_size_stock',
    'reservations', 'reservation_notes',
]


# =============================================================================
# Test Database Connection
# =============================================================================

def get_mysql_url() -> URL:
    """
    Build the MySQL URL from environment variables.

    Raises:
        ValueError: If required environment variables are not set
    """
    required_vars = ['TEST_DB_HOST', 'TEST_DB_NAME', 'TEST_DB_USER', 'TEST_DB_PASSWORD']
    missing_vars = [var for var in required_vars if os.getenv(var) is None]

    if missing_vars:
        raise ValueError(
            f"Missing required environment variables: {', '.join(missing_vars)}. "
            "Set these before running integration tests."
        )

    return URL.create(
        drivername="mysql+pymysql",
        username=os.getenv('TEST_DB_USER'),
        password=os.getenv('TEST_DB_PASSWORD'),
        host=os.getenv('TEST_DB_HOST'),
        port=int(os.getenv('TEST_DB_PORT', '3306')),
        database=os.getenv('TEST_DB_NAME'),
        query={"charset": "utf8mb4"},
    )


@pytest.fixture(scope='session')
def mysql_engine():
    """
    Create MySQL engine for integration tests.

    Safety Features:
        - Skips when required environment variables are missing
        - Blocks running against protected database names (prod/dev)
    """
    db_name = os.getenv('TEST_DB_NAME')
    if db_name in PROTECTED_DATABASE_NAMES:
        pytest.fail(
            f"SAFETY ERROR: TEST_DB_NAME='{db_name}' is a protected database.\n"
            f"Protected databases: {PROTECTED_DATABASE_NAMES}\n"
            f"Use 'jersey_catalog_test' or another dedicated test database."
        )

    try:
        url = get_mysql_url()
    except ValueError as e:
        pytest.skip(f"MySQL integration tests skipped: {e}")

    engine = create_engine(url, echo=False)
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))

    yield engine

    engine.dispose()


@pytest.fixture
def mysql_with_schema(mysql_engine):
    """
    Create the catalog tables for one test.

    DDL commits implicitly in MySQL, so tables are dropped explicitly afterwards.
    """
    with mysql_engine.begin() as conn:
        for table in reversed(MYSQL_TABLES):
            conn.execute(text(f"DROP TABLE IF EXISTS `{table}`"))
        for ddl in MYSQL_DDL:
            conn.execute(text(ddl))

    yield mysql_engine

    with mysql_engine.begin() as conn:
        for table in reversed(MYSQL_TABLES):
            conn.execute(text(f"DROP TABLE IF EXISTS `{table}`"))


@pytest.fixture
def mysql_connection(mysql_with_schema):
    """Connection inside a transaction that's rolled back after the test."""
    connection = mysql_with_schema.connect()
    transaction = connection.begin()

    try:
        yield connection
    finally:
        transaction.rollback()
        connection.close()


@pytest.fixture
def mysql_introspector(mysql_with_schema):
    """Introspector over the test database catalog with its own cache."""
    return SchemaIntrospector(
        connect=mysql_with_schema.connect,
        database_name=os.getenv('TEST_DB_NAME'),
        cache=MetadataCache(),
        excluded_tables=('reservations',),
        immutable_columns=('tax_id',),
    )
