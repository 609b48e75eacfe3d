"""
Jersey Catalog API - Product Repository
Generic CRUD over products plus the per-actor final price overlay.

The overlay never touches stored data: every read computes final_price from
price, offer_price and the acting client's discount percentage.
"""

from typing import Any, Dict, List, Mapping, Optional

from database.calculators import calculate_final_price
from database.schema import tables
from models.actor import ActorContext

from .generic_repository import GenericRepository

# Descriptive attributes the catalog can be filtered on
FILTERABLE_COLUMNS = ("country", "type", "color")

FINAL_PRICE_FIELD = "final_price"


class ProductRepository(GenericRepository):
    """Repository for the products table."""

    table = tables.PRODUCTS

    def discount_for(self, actor: Optional[ActorContext]) -> Any:
        """
        Discount percentage of the actor's client.

        Returns:
            discount_percentage of the affiliated client, 0 when there is no
            actor, no affiliation or the client no longer exists
        """
        if actor is None or actor.client_id is None:
            return 0
        client = GenericRepository(self.conn, tables.CLIENTS, self.introspector).find(actor.client_id)
        if client is None:
            return 0
        return client.get(tables.CLIENT_DISCOUNT_COLUMN) or 0

    def all_with_final_price(self,
                             actor: Optional[ActorContext] = None,
                             filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        List products priced for the actor.

        Args:
            actor: Current caller (None for anonymous reads)
            filters: country / type / color equality filters; blank values and
                other keys are ignored

        Returns:
            Product rows, each with final_price
        """
        discount = self.discount_for(actor)
        products = self.all(self._descriptive_filters(filters))
        return [self._with_final_price(product, discount) for product in products]

    def find_with_final_price(self, product_id: Any, actor: Optional[ActorContext] = None) -> Optional[Dict[str, Any]]:
        product = self.find(product_id)
        if product is None:
            return None
        return self._with_final_price(product, self.discount_for(actor))

    @staticmethod
    def _descriptive_filters(filters: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        if not filters:
            return {}
        selected = {}
        for name in FILTERABLE_COLUMNS:
            value = filters.get(name)
            if value is None or str(value).strip() == "":
                continue
            selected[name] = str(value).strip()
        return selected

    @staticmethod
    def _with_final_price(product: Dict[str, Any], discount: Any) -> Dict[str, Any]:
        priced = dict(product)
        priced[FINAL_PRICE_FIELD] = calculate_final_price(
            product.get("price") or 0,
            offer_price=product.get("offer_price"),
            discount=discount,
        )
        return priced
