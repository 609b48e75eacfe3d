"""
Query Builders
==============

Metadata-driven statement construction.

Modules:
- query_builder.py: SELECT with display joins, INSERT over the fillable set,
  partial UPDATE plans, DELETE by primary key

Usage:
    from database.queries.builders import QueryBuilder
"""

from .query_builder import BuiltQuery, QueryBuilder, UpdatePlan, quote

__all__ = [
    "BuiltQuery",
    "QueryBuilder",
    "UpdatePlan",
    "quote",
]
