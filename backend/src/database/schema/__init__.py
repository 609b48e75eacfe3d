"""
Jersey Catalog API - Runtime Schema
===================================

The database catalog is the only source of table shapes: nothing here is
declared per entity.

Usage:
    from database.schema import get_introspector, tables

    introspector = get_introspector()
    introspector.validate(tables.RESOURCE_TABLES)
    introspector.classify(tables.PRODUCTS).fillable

Modules:
- metadata: immutable ColumnMetadata / TableMetadata / ColumnClassification
- classifier: pure fillable/updatable/mandatory/foreign-key rules
- introspector: catalog query + process-wide cache
- tables: table names and the per-table display label lookup
"""

from . import classifier, tables
from .introspector import SchemaIntrospector, get_introspector
from .metadata import (
    ColumnClassification,
    ColumnMetadata,
    ForeignKeyRef,
    TableMetadata,
    TableSchema,
)

__all__ = [
    'classifier',
    'tables',
    'SchemaIntrospector',
    'get_introspector',
    'ColumnClassification',
    'ColumnMetadata',
    'ForeignKeyRef',
    'TableMetadata',
    'TableSchema',
]
