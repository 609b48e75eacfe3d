"""
Final Price Calculation
=======================

A product's final price is derived per request and never stored:

    offer price present  -> offer price
    otherwise            -> base price * (1 - discount / 100)

The result is rounded to whole currency units with ROUND_HALF_UP, so
1005 at 50% is 503 and 999 at 33% is 669.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Optional

HUNDRED = Decimal(100)
WHOLE_UNITS = Decimal(1)


def _to_decimal(value: Any, name: str) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"{name} must be numeric, got {value!r}") from e
    if not amount.is_finite():
        raise ValueError(f"{name} must be finite, got {value!r}")
    return amount


def calculate_final_price(base_price: Any,
                          offer_price: Optional[Any] = None,
                          discount: Any = 0) -> int:
    """
    Compute the price a given actor pays.

    Args:
        base_price: List price (int, Decimal or numeric string)
        offer_price: Fixed offer price; wins outright when present
        discount: Percentage discount in [0, 100] of the acting client

    Returns:
        Final price in whole currency units

    Raises:
        ValueError: On negative prices or a discount outside 0-100
    """
    base = _to_decimal(base_price, "base_price")
    if base < 0:
        raise ValueError("base_price cannot be negative")

    if offer_price is not None and offer_price != "":
        offer = _to_decimal(offer_price, "offer_price")
        if offer < 0:
            raise ValueError("offer_price cannot be negative")
        return int(offer.quantize(WHOLE_UNITS, rounding=ROUND_HALF_UP))

    pct = _to_decimal(discount if discount is not None else 0, "discount")
    if pct < 0 or pct > HUNDRED:
        raise ValueError("discount must be between 0 and 100")

    final = base * (HUNDRED - pct) / HUNDRED
    return int(final.quantize(WHOLE_UNITS, rounding=ROUND_HALF_UP))
