"""
Server-side price table for item customizations.

Both the checkout cart and the order store price a line through ``unit_price``,
so the total a customer sees is the total the order is stored with.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bistro.schemas.order import ItemCustomizations

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")
TAX_RATE = Decimal("0.08")

SIZE_PRICE_DELTAS: dict[str, Decimal] = {
    "small": Decimal("-2.00"),
    "medium": Decimal("0.00"),
    "large": Decimal("4.00"),
}

CRUST_PRICE_DELTAS: dict[str, Decimal] = {
    "classic": Decimal("0.00"),
    "thin": Decimal("0.00"),
    "stuffed": Decimal("3.00"),
}

TOPPING_PRICE = Decimal("1.50")


def to_money(value: Decimal | int | str) -> Decimal:
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def customization_delta(customizations: ItemCustomizations | None) -> Decimal:
    if customizations is None:
        return ZERO
    delta = ZERO
    if customizations.size:
        delta += SIZE_PRICE_DELTAS[customizations.size]
    if customizations.crust:
        delta += CRUST_PRICE_DELTAS[customizations.crust]
    delta += TOPPING_PRICE * len(customizations.toppings)
    return delta


def unit_price(base_price: Decimal, customizations: ItemCustomizations | None = None) -> Decimal:
    return to_money(max(Decimal(base_price) + customization_delta(customizations), ZERO))


def line_total(price: Decimal, quantity: int) -> Decimal:
    return to_money(Decimal(price) * quantity)


def tax_for(subtotal: Decimal) -> Decimal:
    return to_money(Decimal(subtotal) * TAX_RATE)
