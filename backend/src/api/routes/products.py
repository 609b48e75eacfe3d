"""
Jersey Catalog API - Products API Routes
========================================

GET    /private/products?country=&type=&color=
GET    /private/products/<id>
POST   /private/products                                 admin, editor
PUT    /private/products/<id>                            admin, editor
DELETE /private/products/<id>                            admin, editor

Stock per size:
GET    /private/products/<product_id>/stock
POST   /private/products/<product_id>/stock              admin, editor
GET    /private/products/<product_id>/stock/<size_id>
PUT    /private/products/<product_id>/stock/<size_id>    admin, editor
DELETE /private/products/<product_id>/stock/<size_id>    admin, editor

Product reads carry final_price, computed for the current actor.
"""

from typing import Any, Dict, List, Mapping, Optional

from flask import Blueprint, request

from api.middleware.auth import current_actor, login_required, roles_required
from api.routes.resource import ResourceController, json_body
from database.repositories.product_repository import FILTERABLE_COLUMNS, ProductRepository
from database.repositories.stock_repository import StockRepository
from models.actor import ROLE_ADMIN, ROLE_EDITOR

products_bp = Blueprint('products', __name__)

PRODUCT_HIDDEN_FIELDS = ("category_id",)
STOCK_HIDDEN_FIELDS = ("product_id", "size_id")

STAFF = (ROLE_ADMIN, ROLE_EDITOR)


class ProductController(ResourceController):
    """Products with the per-actor price overlay on every read."""

    def read_all(self, repo: ProductRepository, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        return repo.all_with_final_price(current_actor(), filters)

    def read_one(self, repo: ProductRepository, key: Any) -> Optional[Dict[str, Any]]:
        return repo.find_with_final_price(key, current_actor())


products = ProductController(ProductRepository, hidden_fields=PRODUCT_HIDDEN_FIELDS)
stock = ResourceController(StockRepository, hidden_fields=STOCK_HIDDEN_FIELDS)


def _stock_key(product_id: int, size_id: int) -> Dict[str, int]:
    return {"product_id": product_id, "size_id": size_id}


# =============================================================================
# PRODUCTS
# =============================================================================

@products_bp.route('/products', methods=['GET'])
@login_required
def list_products():
    """
    List products priced for the caller.

    Query Parameters:
        country, type, color (str): optional equality filters
    """
    filters = {name: request.args.get(name) for name in FILTERABLE_COLUMNS if name in request.args}
    return products.index(filters)


@products_bp.route('/products/<int:product_id>', methods=['GET'])
@login_required
def get_product(product_id: int):
    return products.show(product_id)


@products_bp.route('/products', methods=['POST'])
@login_required
@roles_required(*STAFF)
def create_product():
    return products.store(json_body())


@products_bp.route('/products/<int:product_id>', methods=['PUT', 'PATCH'])
@login_required
@roles_required(*STAFF)
def update_product(product_id: int):
    return products.update(product_id, json_body())


@products_bp.route('/products/<int:product_id>', methods=['DELETE'])
@login_required
@roles_required(*STAFF)
def delete_product(product_id: int):
    return products.destroy(product_id)


# =============================================================================
# STOCK
# =============================================================================

@products_bp.route('/products/<int:product_id>/stock', methods=['GET'])
@login_required
def list_stock(product_id: int):
    return stock.index({"product_id": product_id})


@products_bp.route('/products/<int:product_id>/stock', methods=['POST'])
@login_required
@roles_required(*STAFF)
def create_stock(product_id: int):
    data = dict(json_body())
    data["product_id"] = product_id
    return stock.store(data)


@products_bp.route('/products/<int:product_id>/stock/<int:size_id>', methods=['GET'])
@login_required
def get_stock(product_id: int, size_id: int):
    return stock.show(_stock_key(product_id, size_id))


@products_bp.route('/products/<int:product_id>/stock/<int:size_id>', methods=['PUT', 'PATCH'])
@login_required
@roles_required(*STAFF)
def update_stock(product_id: int, size_id: int):
    return stock.update(_stock_key(product_id, size_id), json_body())


@products_bp.route('/products/<int:product_id>/stock/<int:size_id>', methods=['DELETE'])
@login_required
@roles_required(*STAFF)
def delete_stock(product_id: int, size_id: int):
    return stock.destroy(_stock_key(product_id, size_id))
