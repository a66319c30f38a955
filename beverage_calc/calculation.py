"""Money arithmetic for line totals and the grand total."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable

from beverage_calc.models import LineItem

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_price(value: object) -> Decimal:
    """Coerce user input to a non-negative Decimal; unparsable input becomes 0."""
    if isinstance(value, Decimal):
        price = value
    elif isinstance(value, bool) or value is None:
        return ZERO
    else:
        try:
            # str() keeps 45.1 as 45.1 instead of the binary float expansion.
            price = Decimal(str(value).strip() or "0")
        except InvalidOperation:
            return ZERO
    if not price.is_finite() or price < 0:
        return ZERO
    return price


def to_quantity(value: object) -> int:
    """Coerce user input to a non-negative whole number of cases."""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return max(0, value)
    try:
        parsed = Decimal(str(value).strip() or "0")
    except InvalidOperation:
        return 0
    if not parsed.is_finite():
        return 0
    return max(0, int(parsed))


def line_total(unit_price: object, quantity: object) -> Decimal:
    return to_price(unit_price) * to_quantity(quantity)


def grand_total(items: Iterable[LineItem]) -> Decimal:
    """Fresh O(n) sum of line totals."""
    return sum((line_total(item.unit_price, item.quantity) for item in items), ZERO)


def quantize_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)
