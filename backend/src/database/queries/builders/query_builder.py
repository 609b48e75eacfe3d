"""
Query Builder
=============

Builds parameterized SELECT / INSERT / UPDATE / DELETE statements for one
table from its introspected schema.

Rules:
- Values are always bound (:name), never interpolated
- Identifiers come from the table metadata; anything else is rejected before
  it reaches SQL text, then backtick-quoted
- Every foreign-key column in a SELECT gets a LEFT JOIN that surfaces the
  referenced row's display label

Usage:
    from database.queries.builders import QueryBuilder

    builder = QueryBuilder(schema, reference_lookup=introspector.load)
    query = builder.select(filters={"country": "Chile"})
    conn.execute(query.statement(), query.params)
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy import text
from sqlalchemy.sql.elements import TextClause

from database.exceptions import SchemaError
from database.schema import classifier, tables
from database.schema.metadata import ForeignKeyRef, TableMetadata, TableSchema, is_valid_identifier
from utils.config import IMMUTABLE_COLUMNS

TABLE_ALIAS = "t"
KEY_PARAM_PREFIX = "key_"
SET_PARAM_PREFIX = "set_"


@dataclass(frozen=True)
class BuiltQuery:
    """SQL text plus its bound parameters."""
    sql: str
    params: Dict[str, Any] = field(default_factory=dict)

    def statement(self) -> TextClause:
        return text(self.sql)


@dataclass(frozen=True)
class UpdatePlan:
    """
    Outcome of planning a partial update.

    Attributes:
        query: UPDATE statement, or None when no writable column was supplied
        applied: Input keys that made it into the SET clause
        not_updated: Input keys dropped because they are not writable
    """
    query: Optional[BuiltQuery]
    applied: Tuple[str, ...] = ()
    not_updated: Tuple[str, ...] = ()


def quote(identifier: str) -> str:
    """Backtick-quote an identifier that already passed validation."""
    if not is_valid_identifier(identifier):
        raise SchemaError(f"Invalid identifier: {identifier!r}")
    return f"`{identifier}`"


class QueryBuilder:
    """
    Statement factory for a single table.

    Args:
        schema: Cached metadata and classification of the table
        reference_lookup: Resolves a referenced table's metadata, used to check
            that the display label column exists there
        immutable: Business identifiers withheld from capability-adjusted updates
    """

    def __init__(self,
                 schema: TableSchema,
                 reference_lookup: Optional[Callable[[str], TableMetadata]] = None,
                 immutable: Iterable[str] = IMMUTABLE_COLUMNS):
        self.schema = schema
        self.meta = schema.metadata
        self.classification = schema.classification
        self._reference_lookup = reference_lookup
        self._immutable = tuple(immutable)

    @property
    def table(self) -> str:
        return self.meta.name

    # =========================================================================
    # SELECT
    # =========================================================================

    def select(self,
               columns: Optional[Sequence[str]] = None,
               filters: Optional[Mapping[str, Any]] = None) -> BuiltQuery:
        """
        SELECT a column subset with display joins for its foreign keys.

        Args:
            columns: Columns to return (default: every column, ordinal order)
            filters: Equality conditions ANDed together

        Returns:
            BuiltQuery; each foreign key adds "<referenced>_label"
            (then "_label_2", "_label_3" for repeated references)
        """
        columns = list(columns) if columns else list(self.meta.column_names)
        for name in columns:
            self._require_column(name)

        select_parts = [f"{TABLE_ALIAS}.{quote(name)}" for name in columns]
        joins = []
        label_counts: Dict[str, int] = {}

        for name in columns:
            ref = self.classification.foreign_keys.get(name)
            if ref is None:
                continue
            alias = f"r{len(joins) + 1}"
            label_counts[ref.table] = label_counts.get(ref.table, 0) + 1
            label_alias = f"{ref.table}_label"
            if label_counts[ref.table] > 1:
                label_alias = f"{label_alias}_{label_counts[ref.table]}"

            select_parts.append(f"{alias}.{quote(self._label_column(ref))} AS {quote(label_alias)}")
            joins.append(
                f"LEFT JOIN {quote(ref.table)} {alias} "
                f"ON {TABLE_ALIAS}.{quote(name)} = {alias}.{quote(ref.column)}"
            )

        where, params = self._where(filters, prefix=f"{TABLE_ALIAS}.")
        sql = f"SELECT {', '.join(select_parts)} FROM {quote(self.table)} {TABLE_ALIAS}"
        if joins:
            sql += " " + " ".join(joins)
        return BuiltQuery(sql + where, params)

    def count(self, filters: Optional[Mapping[str, Any]] = None) -> BuiltQuery:
        where, params = self._where(filters)
        return BuiltQuery(f"SELECT COUNT(*) AS total FROM {quote(self.table)}{where}", params)

    # =========================================================================
    # WRITES
    # =========================================================================

    def insert(self, data: Mapping[str, Any]) -> BuiltQuery:
        """
        INSERT covering exactly the fillable columns.

        Absent fillable keys bind NULL; keys outside the fillable set are
        ignored.
        """
        columns = self.classification.fillable
        if not columns:
            raise SchemaError(f"Table {self.table} has no fillable columns", table=self.table)

        sql = (
            f"INSERT INTO {quote(self.table)} ({', '.join(quote(c) for c in columns)}) "
            f"VALUES ({', '.join(':' + c for c in columns)})"
        )
        return BuiltQuery(sql, {c: data.get(c) for c in columns})

    def update(self,
               key: Any,
               data: Mapping[str, Any],
               granted: Iterable[str] = (),
               restricted: Iterable[str] = ()) -> UpdatePlan:
        """
        Plan a partial UPDATE.

        Only keys present in data and writable for this caller are SET; a key
        counts as present even when its value is None.

        Args:
            key: Primary key (scalar, tuple or mapping)
            data: Requested changes
            granted: Capability-granted extra columns
            restricted: Columns withheld from this caller

        Returns:
            UpdatePlan
        """
        writable = set(self.writable_columns(granted, restricted))
        applied = tuple(name for name in data if name in writable)
        not_updated = tuple(name for name in data if name not in writable)

        if not applied:
            return UpdatePlan(query=None, applied=(), not_updated=not_updated)

        return UpdatePlan(
            query=self._update_query(key, {name: data[name] for name in applied}),
            applied=applied,
            not_updated=not_updated,
        )

    def set_fields(self, key: Any, values: Mapping[str, Any]) -> BuiltQuery:
        """UPDATE arbitrary non-key columns, for flows the system drives itself."""
        if not values:
            raise ValueError("set_fields requires at least one column")
        for name in values:
            self._require_column(name)
            if self.meta.column(name).is_primary_key:
                raise SchemaError(f"Cannot set primary key column {name}", table=self.table)
        return self._update_query(key, values)

    def delete(self, key: Any) -> BuiltQuery:
        where, params = self._where(self.key_filter(key))
        return BuiltQuery(f"DELETE FROM {quote(self.table)}{where}", params)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def writable_columns(self, granted: Iterable[str] = (), restricted: Iterable[str] = ()) -> Tuple[str, ...]:
        """Updatable set, adjusted by the caller's capabilities."""
        granted = tuple(granted)
        restricted = tuple(restricted)
        if not granted and not restricted:
            return self.classification.updatable
        return classifier.updatable(self.meta, granted, restricted, immutable=self._immutable)

    def key_filter(self, key: Any) -> Dict[str, Any]:
        """
        Normalize a primary key into a column -> value filter.

        Accepts a scalar for simple keys, a tuple in key-column order, or a
        mapping keyed by column name.

        Raises:
            ValueError: If the key does not match the primary key's arity
        """
        pk = self.meta.primary_key
        if not pk:
            raise SchemaError(f"Table {self.table} has no primary key", table=self.table)

        if isinstance(key, Mapping):
            missing = [name for name in pk if name not in key]
            if missing:
                raise ValueError(f"Key for {self.table} is missing {', '.join(missing)}")
            return {name: key[name] for name in pk}

        if isinstance(key, (tuple, list)):
            if len(key) != len(pk):
                raise ValueError(f"Key for {self.table} needs {len(pk)} values, got {len(key)}")
            return dict(zip(pk, key))

        if len(pk) != 1:
            raise ValueError(f"Table {self.table} has a composite key {pk}; pass a tuple or mapping")
        return {pk[0]: key}

    def _update_query(self, key: Any, values: Mapping[str, Any]) -> BuiltQuery:
        where, params = self._where(self.key_filter(key))
        assignments = ", ".join(f"{quote(name)} = :{SET_PARAM_PREFIX}{name}" for name in values)
        params.update({f"{SET_PARAM_PREFIX}{name}": value for name, value in values.items()})
        return BuiltQuery(f"UPDATE {quote(self.table)} SET {assignments}{where}", params)

    def _where(self, filters: Optional[Mapping[str, Any]], prefix: str = "") -> Tuple[str, Dict[str, Any]]:
        if not filters:
            return "", {}

        conditions: List[str] = []
        params: Dict[str, Any] = {}
        for name, value in filters.items():
            self._require_column(name)
            param = f"{KEY_PARAM_PREFIX}{name}"
            conditions.append(f"{prefix}{quote(name)} = :{param}")
            params[param] = value
        return " WHERE " + " AND ".join(conditions), params

    def _require_column(self, name: str) -> None:
        if not is_valid_identifier(name) or not self.meta.has_column(name):
            raise SchemaError(f"Unknown column {name!r} in table {self.table}", table=self.table)

    def _label_column(self, ref: ForeignKeyRef) -> str:
        label = tables.display_column(ref.table)
        if self._reference_lookup is None:
            return label
        referenced = self._reference_lookup(ref.table)
        return label if referenced.has_column(label) else ref.column
