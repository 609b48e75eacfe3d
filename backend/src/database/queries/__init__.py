"""
Jersey Catalog API - Query Modules
==================================

Structure:
- builders/: metadata-driven statement construction shared by every repository

Usage:
    from database.queries import QueryBuilder

    builder = QueryBuilder(introspector.schema("sizes"))
    query = builder.select()
"""

from .builders import BuiltQuery, QueryBuilder, UpdatePlan

__all__ = [
    "BuiltQuery",
    "QueryBuilder",
    "UpdatePlan",
]
