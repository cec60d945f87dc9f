"""
Messages pushed to kitchen displays over the ``/ws/kitchen`` socket.

Each message carries the full kitchen order list, so a display only ever needs
the most recent one it received.
"""

from typing import Literal

from bistro.schemas.base import ApiModel
from bistro.schemas.order import KitchenOrder

KITCHEN_ORDERS_EVENT = "kitchen:orders"


class KitchenOrdersMessage(ApiModel):
    type: Literal["kitchen:orders"] = KITCHEN_ORDERS_EVENT
    data: list[KitchenOrder]

    model_config = {"extra": "ignore"}
