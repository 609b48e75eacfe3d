"""
Jersey Catalog API - Client Repository
"""

from typing import Any, Dict, List

from database.queries.builders import BuiltQuery, quote
from database.schema import tables

from .generic_repository import GenericRepository


class ClientRepository(GenericRepository):
    """Repository for the clients table."""

    table = tables.CLIENTS

    def find_all_with_discount(self) -> List[Dict[str, Any]]:
        """Clients carrying a positive discount percentage, best discount first."""
        discount = quote(tables.CLIENT_DISCOUNT_COLUMN)
        query = BuiltQuery(f"""
            SELECT *
            FROM {quote(self.table)}
            WHERE {discount} > 0
            ORDER BY {discount} DESC, `id`
        """)
        return self._fetch_all(query)
