"""
Jersey Catalog API - Size Repository
"""

from database.schema import tables

from .generic_repository import GenericRepository


class SizeRepository(GenericRepository):
    """Repository for the sizes table; no behaviour beyond the generic CRUD."""

    table = tables.SIZES
