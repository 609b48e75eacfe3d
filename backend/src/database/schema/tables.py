"""
Table Names and Display Labels
==============================

The only table-specific knowledge in the data-access layer. Query code looks
these up; it never branches on table names inline.
"""

USERS = "users"
PRODUCTS = "products"
CLIENTS = "clients"
SIZES = "sizes"
STOCK = "product_size_stock"

RESOURCE_TABLES = (USERS, PRODUCTS, CLIENTS, SIZES, STOCK)

# Human-readable column surfaced when another table joins to this one
DISPLAY_COLUMNS = {
    CLIENTS: "trade_name",
    PRODUCTS: "title",
    SIZES: "label",
}
DEFAULT_DISPLAY_COLUMN = "name"

# Column on CLIENTS holding the percentage discount applied to product prices
CLIENT_DISCOUNT_COLUMN = "discount_percentage"


def display_column(table: str) -> str:
    """Label column for a referenced table."""
    return DISPLAY_COLUMNS.get(table, DEFAULT_DISPLAY_COLUMN)
