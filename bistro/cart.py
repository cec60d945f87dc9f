"""
Customer-side cart and checkout draft.

The cart holds menu item snapshots as the client received them from
``GET /api/menu``, groups equal selections into one line and prices lines with
the same customization table the server uses. Nothing computed here is sent to
the server as a price: ``CheckoutDraft.to_order_request`` carries only ids,
quantities and selections, and the server recomputes the total.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from pydantic import EmailStr, Field, ValidationError

from bistro.schemas.base import ApiModel, Money, UtcDateTime
from bistro.schemas.menu import MenuItemRead
from bistro.schemas.order import ItemCustomizations, OrderCreate, OrderItemCreate
from bistro.services.pricing import ZERO, line_total, tax_for, to_money, unit_price

logger = logging.getLogger(__name__)


def line_key(menu_item_id: int, customizations: ItemCustomizations | None) -> str:
    if customizations is None or customizations.is_empty():
        return f"{menu_item_id}:default"
    return f"{menu_item_id}:{customizations.key()}"


@dataclass
class CartLine:
    line_id: str
    menu_item: MenuItemRead
    quantity: int
    customizations: ItemCustomizations | None = None

    @property
    def unit_price(self) -> Decimal:
        return unit_price(self.menu_item.price, self.customizations)

    @property
    def total(self) -> Decimal:
        return line_total(self.unit_price, self.quantity)


class Cart:
    def __init__(self) -> None:
        self._lines: list[CartLine] = []

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines)

    def _find(self, line_id: str) -> CartLine | None:
        for line in self._lines:
            if line.line_id == line_id:
                return line
        return None

    def add(
        self,
        menu_item: MenuItemRead,
        quantity: int = 1,
        customizations: ItemCustomizations | None = None,
    ) -> CartLine:
        """Add to the line with the same item and selections, or start a new one."""
        if quantity < 1:
            raise ValueError("quantity must be at least 1")
        line_id = line_key(menu_item.id, customizations)
        existing = self._find(line_id)
        if existing is not None:
            existing.quantity += quantity
            existing.menu_item = menu_item
            return existing
        line = CartLine(line_id, menu_item, quantity, customizations)
        self._lines.append(line)
        return line

    def customize(
        self,
        line_id: str,
        customizations: ItemCustomizations | None,
        menu_item: MenuItemRead | None = None,
    ) -> CartLine | None:
        """
        Change the selections of a line.

        If another line already has the new selections the two are merged and
        the quantities added up.
        """
        source = self._find(line_id)
        if source is None:
            return None
        menu_item = menu_item or source.menu_item
        new_id = line_key(menu_item.id, customizations)

        if new_id != line_id:
            target = self._find(new_id)
            if target is not None:
                self._lines.remove(source)
                target.quantity += source.quantity
                target.menu_item = menu_item
                target.customizations = customizations
                return target

        source.line_id = new_id
        source.menu_item = menu_item
        source.customizations = customizations
        return source

    def remove(self, line_id: str) -> None:
        self._lines = [line for line in self._lines if line.line_id != line_id]

    def update_quantity(self, line_id: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove(line_id)
            return
        line = self._find(line_id)
        if line is not None:
            line.quantity = quantity

    def clear(self) -> None:
        self._lines.clear()

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    @property
    def subtotal(self) -> Decimal:
        return to_money(sum((line.total for line in self._lines), ZERO))

    def __len__(self) -> int:
        return len(self._lines)

    # -----------------------------------------------------------------------
    # Persistence
    # -----------------------------------------------------------------------

    def to_json(self) -> str:
        return json.dumps(
            [
                {
                    "lineItemId": line.line_id,
                    "menuItem": line.menu_item.model_dump(mode="json", by_alias=True),
                    "quantity": line.quantity,
                    "customizations": (
                        line.customizations.model_dump(mode="json", by_alias=True)
                        if line.customizations is not None
                        else None
                    ),
                }
                for line in self._lines
            ]
        )

    @classmethod
    def from_json(cls, raw: str | None) -> Cart:
        """Rebuild a saved cart. Unreadable data gives an empty cart, bad lines are skipped."""
        cart = cls()
        if not raw:
            return cart
        try:
            saved = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable saved cart")
            return cart
        if not isinstance(saved, list):
            return cart

        for entry in saved:
            if not isinstance(entry, dict):
                continue
            quantity = entry.get("quantity")
            if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
                continue
            try:
                menu_item = MenuItemRead.model_validate(entry.get("menuItem"))
                customizations = (
                    ItemCustomizations.model_validate(entry["customizations"])
                    if entry.get("customizations")
                    else None
                )
            except ValidationError:
                continue
            cart.add(menu_item, quantity, customizations)
        return cart


# ---------------------------------------------------------------------------
# Checkout draft
# ---------------------------------------------------------------------------


class DraftLine(ApiModel):
    menu_item_id: int = Field(gt=0)
    name: str
    price: Money
    quantity: int = Field(ge=1)
    customizations: ItemCustomizations | None = None


class CheckoutDraft(ApiModel):
    customer_name: str = Field(min_length=1)
    customer_email: EmailStr
    customer_phone: str = Field(min_length=1)
    items: list[DraftLine] = Field(min_length=1)
    subtotal: Money
    tax: Money
    total: Money
    created_at: UtcDateTime

    @classmethod
    def from_cart(
        cls,
        cart: Cart,
        customer_name: str,
        customer_email: str,
        customer_phone: str,
    ) -> CheckoutDraft:
        subtotal = cart.subtotal
        tax = tax_for(subtotal)
        return cls(
            customer_name=customer_name,
            customer_email=customer_email,
            customer_phone=customer_phone,
            items=[
                DraftLine(
                    menu_item_id=line.menu_item.id,
                    name=line.menu_item.name,
                    price=line.unit_price,
                    quantity=line.quantity,
                    customizations=line.customizations,
                )
                for line in cart.lines
            ],
            subtotal=subtotal,
            tax=tax,
            total=to_money(subtotal + tax),
            created_at=datetime.utcnow(),
        )

    def to_order_request(self) -> OrderCreate:
        """The order creation payload: ids, quantities and selections only."""
        return OrderCreate(
            customer_name=self.customer_name,
            customer_email=self.customer_email,
            customer_phone=self.customer_phone,
            items=[
                OrderItemCreate(
                    menu_item_id=line.menu_item_id,
                    quantity=line.quantity,
                    customizations=line.customizations,
                )
                for line in self.items
            ],
        )
