"""
Jersey Catalog API - Generic Repository
CRUD facade shared by every resource table.

Nothing here is written per entity: columns, keys, joins and write
permissions all come from the introspected schema.

Usage:
    with get_db_connection() as conn:
        sizes = GenericRepository(conn, "sizes")
        size_id = sizes.create({"label": "XL"})
        result = sizes.update(size_id, {"label": "XXL", "id": 9})
        result.not_updated  # ("id",)
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from database.exceptions import ConflictError, PersistenceError, is_conflict
from database.queries.builders import BuiltQuery, QueryBuilder
from database.schema import SchemaIntrospector, get_introspector
from database.schema.metadata import ColumnClassification, TableSchema
from utils.logger import logger, log_database_error


@dataclass(frozen=True)
class UpdateResult:
    """
    Outcome of a partial update.

    success is False when no supplied key was writable (no SQL ran) or when
    the key matched no row.
    """
    success: bool
    not_updated: Tuple[str, ...] = ()
    applied: Tuple[str, ...] = ()


class GenericRepository:
    """
    Repository over one table.

    Subclasses may set the class attribute `table` and omit it from the
    constructor.
    """

    table: Optional[str] = None

    def __init__(self,
                 connection: Connection,
                 table: Optional[str] = None,
                 introspector: Optional[SchemaIntrospector] = None):
        """
        Initialize repository with database connection.

        Args:
            connection: SQLAlchemy connection object
            table: Table name (defaults to the subclass attribute)
            introspector: Schema source (defaults to the process-wide one)
        """
        self.conn = connection
        self.table = table or self.table
        if not self.table:
            raise ValueError("GenericRepository requires a table name")
        self.introspector = introspector or get_introspector()

    @property
    def schema(self) -> TableSchema:
        return self.introspector.schema(self.table)

    @property
    def classification(self) -> ColumnClassification:
        return self.schema.classification

    @property
    def builder(self) -> QueryBuilder:
        return QueryBuilder(
            self.schema,
            reference_lookup=self.introspector.load,
            immutable=self.introspector.immutable_columns,
        )

    # =========================================================================
    # READS
    # =========================================================================

    def all(self, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        """Fetch every row (optionally equality-filtered) with display labels."""
        return self._fetch_all(self.builder.select(filters=filters))

    def all_by(self, column: str, value: Any) -> List[Dict[str, Any]]:
        return self.all({column: value})

    def find(self, key: Any) -> Optional[Dict[str, Any]]:
        """
        Fetch a row by primary key.

        Args:
            key: Scalar id, tuple or mapping for composite keys

        Returns:
            Row dict or None if not found
        """
        builder = self.builder
        return self._fetch_one(builder.select(filters=builder.key_filter(key)))

    def find_by(self, column: str, value: Any) -> Optional[Dict[str, Any]]:
        return self._fetch_one(self.builder.select(filters={column: value}))

    def count(self) -> int:
        result = self._execute(self.builder.count(), "count")
        return int(result.scalar() or 0)

    # =========================================================================
    # WRITES
    # =========================================================================

    def create(self, data: Mapping[str, Any]) -> Any:
        """
        Insert a row inside its own transaction.

        Uses a savepoint when the connection already has a transaction open,
        so a failed insert never leaves a partial row behind.

        Args:
            data: Column values; only fillable columns are bound

        Returns:
            New id, or the key dict for composite-key tables

        Raises:
            ConflictError: On duplicate or referential constraint violations
            PersistenceError: On any other database failure
        """
        query = self.builder.insert(data)
        transaction = self.conn.begin_nested() if self.conn.in_transaction() else self.conn.begin()
        try:
            result = self.conn.execute(query.statement(), query.params)
            new_id = result.lastrowid
            transaction.commit()
        except SQLAlchemyError as e:
            transaction.rollback()
            raise self._translate(e, "create") from e

        key = self._created_key(data, new_id)
        logger.info(f"Created {self.table} record", extra={"table": self.table, "key": key})
        return key

    def update(self,
               key: Any,
               data: Mapping[str, Any],
               granted: Iterable[str] = (),
               restricted: Iterable[str] = ()) -> UpdateResult:
        """
        Apply the writable subset of data.

        Args:
            key: Primary key
            data: Requested changes
            granted: Capability-granted extra columns
            restricted: Columns withheld from this caller

        Returns:
            UpdateResult listing applied and ignored keys
        """
        plan = self.builder.update(key, data, granted=granted, restricted=restricted)
        if plan.query is None:
            logger.info(f"No writable fields for {self.table} update", extra={
                "table": self.table,
                "not_updated": list(plan.not_updated),
            })
            return UpdateResult(success=False, not_updated=plan.not_updated)

        result = self._execute(plan.query, "update")
        # An unchanged row reports rowcount 0 unless the driver counts found rows
        success = result.rowcount > 0 or self.find(key) is not None
        return UpdateResult(success=success, not_updated=plan.not_updated, applied=plan.applied)

    def set_fields(self, key: Any, values: Mapping[str, Any]) -> bool:
        """Write columns regardless of updatable rules (system flows only)."""
        result = self._execute(self.builder.set_fields(key, values), "set_fields")
        return result.rowcount > 0

    def delete(self, key: Any) -> bool:
        """Delete by primary key; True when a row was removed."""
        result = self._execute(self.builder.delete(key), "delete")
        return result.rowcount > 0

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _created_key(self, data: Mapping[str, Any], new_id: Any) -> Any:
        pk = self.schema.metadata.primary_key
        if len(pk) > 1:
            return {name: data.get(name) for name in pk}
        if len(pk) == 1 and not new_id and data.get(pk[0]) is not None:
            return data[pk[0]]
        return new_id

    def _execute(self, query: BuiltQuery, operation: str):
        try:
            return self.conn.execute(query.statement(), query.params)
        except SQLAlchemyError as e:
            raise self._translate(e, operation) from e

    def _translate(self, error: SQLAlchemyError, operation: str) -> Exception:
        """Map a driver failure to ConflictError (duplicate key, broken reference) or PersistenceError."""
        if isinstance(error, IntegrityError) and is_conflict(error):
            log_database_error(error, f"{operation} rejected by constraint on {self.table}")
            return ConflictError(f"Duplicate or invalid reference in {self.table}", table=self.table)
        log_database_error(error, f"{operation} failed on {self.table}")
        return PersistenceError(f"Failed to {operation} {self.table} record", table=self.table)

    def _fetch_all(self, query: BuiltQuery) -> List[Dict[str, Any]]:
        result = self._execute(query, "select")
        return [dict(row) for row in result.mappings()]

    def _fetch_one(self, query: BuiltQuery) -> Optional[Dict[str, Any]]:
        row = self._execute(query, "select").mappings().first()
        return dict(row) if row is not None else None
