"""
Column Classifier
=================

Pure functions that derive write permissions from a table's metadata.

    fillable    - columns an INSERT binds
    updatable   - columns an UPDATE may SET
    mandatory   - columns a create payload must carry
    foreign_keys - column -> referenced table/column, used for display joins

These are the rules every repository applies; resource endpoints reuse them
to decide which fields to accept before calling create/update.
"""

from typing import Dict, Iterable, Tuple

from utils.config import EXCLUDED_JOIN_TABLES, IMMUTABLE_COLUMNS

from .metadata import ColumnClassification, ForeignKeyRef, TableMetadata


def fillable(meta: TableMetadata) -> Tuple[str, ...]:
    """
    Columns permitted in INSERT payloads.

    A column is fillable when it is not a simple primary key and the database
    would not fill it from a default, or when it is part of a composite
    primary key (join tables need every key column supplied).
    """
    return tuple(
        column.name
        for column in meta.columns
        if (not column.is_primary_key and not column.has_default)
        or column.is_composite_key_part
    )


def updatable(meta: TableMetadata,
              granted: Iterable[str] = (),
              restricted: Iterable[str] = (),
              immutable: Iterable[str] = IMMUTABLE_COLUMNS) -> Tuple[str, ...]:
    """
    Columns permitted in UPDATE payloads.

    Primary keys, auto-increment columns, auto-populated timestamps, enum
    columns and immutable business identifiers are never updatable.

    Args:
        meta: Table metadata
        granted: Extra columns the caller's capability allows; added back
            unless they are keys or auto-increment
        restricted: Columns withheld from this caller
        immutable: Business identifiers that cannot change once set

    Returns:
        Tuple of column names in ordinal order
    """
    immutable = {name.lower() for name in immutable}
    granted = set(granted)
    restricted = set(restricted) - granted

    result = []
    for column in meta.columns:
        if column.is_primary_key or column.is_auto_increment:
            continue
        if column.name in granted:
            result.append(column.name)
            continue
        if column.name in restricted:
            continue
        if column.is_auto_timestamp or column.is_enum:
            continue
        if column.name.lower() in immutable:
            continue
        result.append(column.name)
    return tuple(result)


def mandatory(meta: TableMetadata) -> Tuple[str, ...]:
    """Columns without key, auto-increment, default or NULL fallback."""
    return tuple(
        column.name
        for column in meta.columns
        if not column.is_primary_key
        and not column.is_auto_increment
        and not column.has_default
        and not column.is_nullable
    )


def foreign_keys(meta: TableMetadata,
                 excluded_tables: Iterable[str] = EXCLUDED_JOIN_TABLES) -> Dict[str, ForeignKeyRef]:
    """
    Foreign-key columns that get a display join.

    References into excluded tables are skipped; they form a cyclic join in
    this schema.
    """
    excluded = set(excluded_tables)
    return {
        column.name: ForeignKeyRef(column.referenced_table, column.referenced_column)
        for column in meta.columns
        if column.referenced_table and column.referenced_table not in excluded
    }


def enum_columns(meta: TableMetadata) -> Dict[str, Tuple[str, ...]]:
    """Enum columns and their allowed values."""
    return {column.name: column.enum_values for column in meta.columns if column.is_enum}


def classify(meta: TableMetadata,
             excluded_tables: Iterable[str] = EXCLUDED_JOIN_TABLES,
             immutable: Iterable[str] = IMMUTABLE_COLUMNS) -> ColumnClassification:
    """Compute every subset at once, for caching next to the metadata."""
    return ColumnClassification(
        fillable=fillable(meta),
        updatable=updatable(meta, immutable=immutable),
        mandatory=mandatory(meta),
        foreign_keys=foreign_keys(meta, excluded_tables),
    )
