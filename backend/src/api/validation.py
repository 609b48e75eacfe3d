"""
Jersey Catalog API - Request Validation
Field-level checks run before any write reaches a repository.

Two layers:
- schema checks derived from the introspected table (mandatory columns on
  create, enum domains, character limits)
- per-resource rules (formats, numeric domains) for each writable resource

Both return a field -> message map; validate_payload raises ValidationError
when the map is not empty.
"""

import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Mapping, Optional

from database.schema import tables
from database.schema.metadata import TableSchema
from models.actor import ROLES

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")
TAX_ID_PATTERN = re.compile(r"^\d{7,8}-[0-9kK]$")
TWO_DECIMALS_PATTERN = re.compile(r"^\d+(\.\d{1,2})?$")
DATE_FORMAT = "%Y-%m-%d"

Errors = Dict[str, str]


class ValidationError(Exception):
    """Caller-supplied data failed field checks; reported as 422."""

    def __init__(self, errors: Errors, message: str = "Validation failed"):
        super().__init__(message)
        self.errors = dict(errors)
        self.message = message


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _present(data: Mapping[str, Any], field: str) -> bool:
    return field in data and data[field] is not None


# =============================================================================
# SHARED RULES
# =============================================================================

def require(data: Mapping[str, Any], fields, errors: Errors) -> None:
    for field in fields:
        if is_blank(data.get(field)) and field not in errors:
            errors[field] = f"The field {field} is required."


def check_email(data: Mapping[str, Any], field: str, errors: Errors) -> None:
    if _present(data, field) and not EMAIL_PATTERN.match(str(data[field])):
        errors[field] = "Invalid email address."


def check_max_lengths(data: Mapping[str, Any], limits: Mapping[str, int], errors: Errors) -> None:
    for field, limit in limits.items():
        if _present(data, field) and len(str(data[field])) > limit:
            errors[field] = f"The field {field} cannot exceed {limit} characters."


def check_money(data: Mapping[str, Any], field: str, errors: Errors,
                minimum: Decimal = Decimal(0), maximum: Optional[Decimal] = None) -> None:
    """Non-negative number with at most two decimals (optionally bounded)."""
    if not _present(data, field):
        return
    raw = str(data[field]).strip()
    try:
        amount = Decimal(raw)
    except InvalidOperation:
        errors[field] = f"The field {field} must be a valid number."
        return
    if amount < minimum or (maximum is not None and amount > maximum):
        bound = f"between {minimum} and {maximum}" if maximum is not None else f"at least {minimum}"
        errors[field] = f"The field {field} must be {bound}."
    elif not TWO_DECIMALS_PATTERN.match(raw):
        errors[field] = f"The field {field} allows up to 2 decimals."


def check_integer(data: Mapping[str, Any], field: str, errors: Errors) -> None:
    if not _present(data, field):
        return
    value = data[field]
    if isinstance(value, bool) or not re.match(r"^-?\d+$", str(value).strip()):
        errors[field] = f"The field {field} must be a whole number."


def check_choice(data: Mapping[str, Any], field: str, choices, errors: Errors, message: str) -> None:
    if not _present(data, field):
        return
    if str(data[field]) not in {str(choice) for choice in choices}:
        errors[field] = message


def check_date(data: Mapping[str, Any], field: str, errors: Errors) -> None:
    if not _present(data, field):
        return
    try:
        datetime.strptime(str(data[field]), DATE_FORMAT)
    except ValueError:
        errors[field] = "Invalid date format (expected YYYY-MM-DD)."


def schema_errors(schema: TableSchema, data: Mapping[str, Any], is_update: bool = False) -> Errors:
    """Checks every table gets from its metadata alone."""
    errors: Errors = {}
    if not is_update:
        require(data, schema.classification.mandatory, errors)

    for name, values in schema.enum_columns().items():
        if _present(data, name) and values and str(data[name]) not in values:
            errors[name] = f"The field {name} must be one of: {', '.join(values)}."

    for column in schema.metadata.columns:
        if column.max_length and _present(data, column.name) and column.name not in errors:
            if len(str(data[column.name])) > column.max_length:
                errors[column.name] = f"The field {column.name} cannot exceed {column.max_length} characters."
    return errors


# =============================================================================
# RESOURCE RULES
# =============================================================================

def validate_user(data: Mapping[str, Any], is_update: bool = False) -> Errors:
    errors: Errors = {}
    if not is_update:
        require(data, ("first_name", "last_name", "email", "password", "role_id"), errors)
    elif "password" in data and is_blank(data["password"]):
        errors["password"] = "The field password cannot be empty."
    check_email(data, "email", errors)
    check_choice(data, "role_id", ROLES, errors, "Invalid role.")
    check_choice(data, "active", (0, 1), errors, "Invalid status (must be 0 or 1).")
    check_date(data, "birth_date", errors)
    return errors


def validate_registration(data: Mapping[str, Any], is_update: bool = False) -> Errors:
    errors: Errors = {}
    require(data, ("first_name", "email", "password"), errors)
    check_email(data, "email", errors)
    check_date(data, "birth_date", errors)
    return errors


def validate_product(data: Mapping[str, Any], is_update: bool = False) -> Errors:
    errors: Errors = {}
    if not is_update:
        require(data, ("title", "price", "sku"), errors)
    check_max_lengths(data, {
        "title": 200,
        "club": 150,
        "country": 80,
        "type": 80,
        "color": 120,
        "sku": 80,
    }, errors)
    check_money(data, "price", errors)
    check_money(data, "offer_price", errors)
    return errors


def validate_client(data: Mapping[str, Any], is_update: bool = False) -> Errors:
    errors: Errors = {}
    if not is_update:
        require(data, ("trade_name", "tax_id"), errors)
    if _present(data, "tax_id") and not TAX_ID_PATTERN.match(str(data["tax_id"])):
        errors["tax_id"] = "Tax id must have no dots and a dash before the check digit (e.g. 12345678-9)."
    check_email(data, "contact_email", errors)
    check_money(data, "discount_percentage", errors, maximum=Decimal(100))
    check_max_lengths(data, {
        "trade_name": 150,
        "tax_id": 30,
        "address": 255,
        "contact_name": 120,
        "contact_email": 120,
    }, errors)
    return errors


def validate_size(data: Mapping[str, Any], is_update: bool = False) -> Errors:
    errors: Errors = {}
    if not is_update:
        require(data, ("label",), errors)
    check_max_lengths(data, {"label": 20}, errors)
    return errors


def validate_stock(data: Mapping[str, Any], is_update: bool = False) -> Errors:
    errors: Errors = {}
    if not is_update:
        require(data, ("size_id", "stock"), errors)
    check_integer(data, "size_id", errors)
    check_integer(data, "stock", errors)
    return errors


RESOURCE_VALIDATORS: Dict[str, Callable[..., Errors]] = {
    tables.USERS: validate_user,
    tables.PRODUCTS: validate_product,
    tables.CLIENTS: validate_client,
    tables.SIZES: validate_size,
    tables.STOCK: validate_stock,
}


def validate_payload(schema: TableSchema,
                     data: Mapping[str, Any],
                     is_update: bool = False,
                     validator: Optional[Callable[..., Errors]] = None) -> None:
    """
    Run resource rules then schema rules.

    Resource messages win when both flag the same field.

    Raises:
        ValidationError: When any field fails
    """
    validator = validator or RESOURCE_VALIDATORS.get(schema.name)
    errors = schema_errors(schema, data, is_update=is_update)
    if validator is not None:
        errors.update(validator(data, is_update=is_update))
    if errors:
        raise ValidationError(errors)
