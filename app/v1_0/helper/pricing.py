"""
Volume discount pricing for sale lines.

Tiers are evaluated top-down with no overlap:

    quantity > 20        -> rejected
    10 <= quantity <= 20 -> 20% off
     4 <= quantity <= 9  -> 10% off
    quantity < 4         -> no discount

All amounts are ``Decimal``; nothing here is cached, callers re-evaluate
whenever they need current values.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from app.core.errors import InvalidQuantityError

MAX_QUANTITY = 20

# (min quantity, rate), highest tier first
DISCOUNT_TIERS: tuple[tuple[int, Decimal], ...] = (
    (10, Decimal("0.20")),
    (4, Decimal("0.10")),
)

ZERO = Decimal("0")


@dataclass(slots=True, frozen=True)
class LinePricing:
    discount: Decimal
    total: Decimal


def discount_rate(quantity: int, product_name: Optional[str] = None) -> Decimal:
    if quantity > MAX_QUANTITY:
        raise InvalidQuantityError(quantity, MAX_QUANTITY, product_name)
    for min_qty, rate in DISCOUNT_TIERS:
        if quantity >= min_qty:
            return rate
    return ZERO


def price_line(quantity: int, unit_price: Decimal, product_name: Optional[str] = None) -> LinePricing:
    """
    Compute discount and total for one line.

    Raises:
        InvalidQuantityError: if quantity exceeds MAX_QUANTITY.
    """
    gross = Decimal(unit_price) * quantity
    rate = discount_rate(quantity, product_name)
    discount = gross * rate if rate else ZERO
    return LinePricing(discount=discount, total=gross - discount)
