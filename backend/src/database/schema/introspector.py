"""
Schema Introspector
===================

Reads column metadata for a table from MySQL's information_schema and keeps
the result (plus its column classification) in the process-wide metadata
cache.

One catalog query per table:
- information_schema.columns for names, defaults, types, keys and extras
- LEFT JOIN key_column_usage, restricted to rows that reference another
  table, for foreign keys
- LEFT JOIN a per-table count of PRI columns to tell simple keys from
  composite ones

There is no invalidation: the schema is assumed static for a deployment.

Usage:
    from database.schema import get_introspector

    schema = get_introspector().schema("products")
    schema.classification.fillable
"""

from contextlib import AbstractContextManager
from typing import Callable, Iterable, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Connection

from database.exceptions import SchemaError
from utils.cache import MetadataCache, get_metadata_cache
from utils.config import DB_NAME, EXCLUDED_JOIN_TABLES, IMMUTABLE_COLUMNS
from utils.logger import log_schema_loaded, logger

from . import classifier
from .metadata import (
    ColumnClassification, ColumnMetadata, TableMetadata, TableSchema, is_valid_identifier,
)

COLUMN_QUERY = text("""
    SELECT
        c.table_name AS table_name,
        c.column_name AS column_name,
        c.ordinal_position AS ordinal_position,
        c.column_default AS column_default,
        c.is_nullable AS is_nullable,
        c.data_type AS data_type,
        c.column_type AS column_type,
        c.character_maximum_length AS character_maximum_length,
        c.column_key AS column_key,
        CASE
            WHEN c.column_key = 'PRI' THEN
                CASE WHEN pk.pk_column_count = 1 THEN 'simple' ELSE 'composite' END
            ELSE NULL
        END AS pk_type,
        c.extra AS extra,
        cu.referenced_table_name AS referenced_table_name,
        cu.referenced_column_name AS referenced_column_name
    FROM information_schema.columns c
    LEFT JOIN information_schema.key_column_usage cu
        ON c.table_schema = cu.table_schema
        AND c.table_name = cu.table_name
        AND c.column_name = cu.column_name
        AND cu.referenced_table_name IS NOT NULL
    LEFT JOIN (
        SELECT table_schema, table_name, COUNT(*) AS pk_column_count
        FROM information_schema.columns
        WHERE column_key = 'PRI'
        GROUP BY table_schema, table_name
    ) AS pk
        ON c.table_schema = pk.table_schema
        AND c.table_name = pk.table_name
    WHERE c.table_schema = :schema_name
        AND c.table_name = :table_name
    ORDER BY c.ordinal_position
""")

ConnectionFactory = Callable[[], AbstractContextManager]


def _default_connect() -> AbstractContextManager:
    from database.connection import get_db_connection
    return get_db_connection()


class SchemaIntrospector:
    """
    Loads and caches table metadata.

    Args:
        connect: Zero-argument callable returning a context manager that
            yields a SQLAlchemy Connection (defaults to get_db_connection)
        database_name: Schema whose catalog is read
        cache: Metadata cache (defaults to the process-wide instance)
        excluded_tables: Referenced tables that never get a display join
        immutable_columns: Business identifiers excluded from updates
    """

    def __init__(self,
                 connect: Optional[ConnectionFactory] = None,
                 database_name: str = DB_NAME,
                 cache: Optional[MetadataCache] = None,
                 excluded_tables: Iterable[str] = EXCLUDED_JOIN_TABLES,
                 immutable_columns: Iterable[str] = IMMUTABLE_COLUMNS):
        self._connect = connect or _default_connect
        self.database_name = database_name
        self.cache = cache if cache is not None else get_metadata_cache()
        self.excluded_tables = tuple(excluded_tables)
        self.immutable_columns = tuple(immutable_columns)

    def load(self, table: str) -> TableMetadata:
        """
        Get a table's column metadata.

        Raises:
            SchemaError: If the table does not exist in the configured database
        """
        return self.schema(table).metadata

    def classify(self, table: str) -> ColumnClassification:
        """Get a table's fillable/updatable/mandatory/foreign-key subsets."""
        return self.schema(table).classification

    def schema(self, table: str) -> TableSchema:
        """Get metadata and classification, loading them on first use."""
        if not is_valid_identifier(table):
            raise SchemaError(f"Invalid table name: {table!r}", table=table)
        return self.cache.get_or_compute(table, lambda: self._build(table))

    def validate(self, tables: Iterable[str]) -> None:
        """
        Load every table up front so a missing table aborts startup.

        Raises:
            SchemaError: On the first table the catalog does not know
        """
        tables = list(tables)
        for table in tables:
            self.schema(table)
        logger.info("Schema validation passed", extra={"tables": tables})

    def _build(self, table: str) -> TableSchema:
        metadata = TableMetadata(name=table, columns=tuple(self._fetch_columns(table)))
        classification = classifier.classify(
            metadata,
            excluded_tables=self.excluded_tables,
            immutable=self.immutable_columns,
        )
        log_schema_loaded(table, len(metadata.columns), len(classification.foreign_keys))
        return TableSchema(metadata=metadata, classification=classification)

    def _fetch_columns(self, table: str) -> List[ColumnMetadata]:
        with self._connect() as conn:
            rows = self._query_catalog(conn, table)

        if not rows:
            raise SchemaError(
                f"Table {table} not found in database {self.database_name}", table=table
            )

        columns = {}
        for row in rows:
            column = ColumnMetadata.from_row(row)
            if not is_valid_identifier(column.name):
                raise SchemaError(f"Unsupported column name {column.name!r} in {table}", table=table)
            # A column referencing several tables appears once per reference; keep the first
            columns.setdefault(column.name, column)
        return list(columns.values())

    def _query_catalog(self, conn: Connection, table: str) -> list:
        result = conn.execute(COLUMN_QUERY, {"schema_name": self.database_name, "table_name": table})
        return [dict(row) for row in result.mappings().all()]


_default_introspector: Optional[SchemaIntrospector] = None


def get_introspector() -> SchemaIntrospector:
    """Get the process default introspector (configured database, global cache)."""
    global _default_introspector
    if _default_introspector is None:
        _default_introspector = SchemaIntrospector()
    return _default_introspector
