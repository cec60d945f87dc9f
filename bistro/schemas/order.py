import json

from pydantic import EmailStr, Field, field_validator

from bistro.models.order import OrderStatus
from bistro.schemas.base import ApiModel, Money, UtcDateTime, blank_to_none
from bistro.services.pricing import CRUST_PRICE_DELTAS, SIZE_PRICE_DELTAS


class ItemCustomizations(ApiModel):
    size: str | None = None
    crust: str | None = None
    toppings: list[str] = Field(default_factory=list, max_length=12)
    special_instructions: str | None = Field(default=None, max_length=500)
    combo_pizzas: list[str] = Field(default_factory=list, max_length=4)
    combo_side: str | None = None
    combo_drink: str | None = None

    @field_validator(
        "size", "crust", "special_instructions", "combo_side", "combo_drink", mode="before"
    )
    @classmethod
    def _blank_to_none(cls, value):
        return blank_to_none(value)

    @field_validator("toppings", "combo_pizzas")
    @classmethod
    def _drop_blank_entries(cls, values: list[str]) -> list[str]:
        return [value.strip() for value in values if value.strip()]

    @field_validator("size")
    @classmethod
    def _known_size(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.lower()
        if value not in SIZE_PRICE_DELTAS:
            raise ValueError(f"Unknown size '{value}'")
        return value

    @field_validator("crust")
    @classmethod
    def _known_crust(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.lower()
        if value not in CRUST_PRICE_DELTAS:
            raise ValueError(f"Unknown crust '{value}'")
        return value

    def is_empty(self) -> bool:
        return not any(
            (
                self.size,
                self.crust,
                self.toppings,
                self.special_instructions,
                self.combo_pizzas,
                self.combo_side,
                self.combo_drink,
            )
        )

    def key(self) -> str:
        """Stable identity of a selection: list order and surrounding whitespace do not matter."""
        return json.dumps(
            {
                "size": self.size or "",
                "crust": self.crust or "",
                "toppings": sorted(self.toppings),
                "specialInstructions": self.special_instructions or "",
                "comboPizzas": sorted(self.combo_pizzas),
                "comboSide": self.combo_side or "",
                "comboDrink": self.combo_drink or "",
            },
            sort_keys=True,
        )


class OrderItemCreate(ApiModel):
    menu_item_id: int = Field(gt=0)
    quantity: int = Field(ge=1)
    customizations: ItemCustomizations | None = None


class OrderCreate(ApiModel):
    customer_name: str
    customer_email: EmailStr
    customer_phone: str
    items: list[OrderItemCreate]

    @field_validator("customer_name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Name is required")
        return value

    @field_validator("customer_phone")
    @classmethod
    def _phone_required(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 10:
            raise ValueError("Valid phone number required")
        return value

    @field_validator("items")
    @classmethod
    def _at_least_one_item(cls, value: list[OrderItemCreate]) -> list[OrderItemCreate]:
        if not value:
            raise ValueError("Order must have at least one item")
        return value


class OrderRead(ApiModel):
    id: int
    customer_name: str
    customer_email: str
    customer_phone: str
    status: OrderStatus
    total_amount: Money
    created_at: UtcDateTime | None


class KitchenOrderItem(ApiModel):
    id: int
    menu_item_id: int
    name: str
    quantity: int
    price_at_time: Money
    image_url: str | None = None
    customizations: ItemCustomizations | None = None


class KitchenOrder(OrderRead):
    items: list[KitchenOrderItem]


class OrderStatusUpdate(ApiModel):
    status: OrderStatus


class CustomerOrderLookup(ApiModel):
    email: EmailStr | None = None
    phone: str | None = Field(default=None, min_length=3)

    @field_validator("email", "phone", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        return blank_to_none(value)
