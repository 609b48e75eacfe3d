"""
Jersey Catalog API - Stock Repository
Units on hand per (product, size); keyed by the composite primary key.
"""

from typing import Any, Dict, List, Optional

from database.schema import tables

from .generic_repository import GenericRepository


class StockRepository(GenericRepository):
    """Repository for the product_size_stock join table."""

    table = tables.STOCK

    def all_for_product(self, product_id: int) -> List[Dict[str, Any]]:
        return self.all_by("product_id", product_id)

    def find_entry(self, product_id: int, size_id: int) -> Optional[Dict[str, Any]]:
        return self.find({"product_id": product_id, "size_id": size_id})
