import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from bistro.config import settings
from bistro.errors import NotFound, StateConflict, ValidationFailed
from bistro.metrics import ORDER_STATUS_UPDATES, ORDERS_CREATED, ORDERS_DELETED
from bistro.models.menu import MenuItem
from bistro.models.order import Order, OrderItem, OrderStatus, is_forward_step
from bistro.schemas.order import (
    CustomerOrderLookup,
    ItemCustomizations,
    KitchenOrder,
    KitchenOrderItem,
    OrderCreate,
)
from bistro.services.pricing import ZERO, line_total, to_money, unit_price

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _build_kitchen_order(order: Order) -> KitchenOrder:
    items = [
        KitchenOrderItem(
            id=item.id,
            menu_item_id=item.menu_item_id,
            name=item.menu_item.name if item.menu_item else f"Item #{item.menu_item_id}",
            quantity=item.quantity,
            price_at_time=item.price_at_time,
            image_url=item.menu_item.image_url if item.menu_item else None,
            customizations=(
                ItemCustomizations.model_validate(item.customizations)
                if item.customizations
                else None
            ),
        )
        for item in order.items
    ]
    return KitchenOrder(
        id=order.id,
        customer_name=order.customer_name,
        customer_email=order.customer_email,
        customer_phone=order.customer_phone,
        status=order.status,
        total_amount=order.total_amount,
        created_at=order.created_at,
        items=items,
    )


def _with_items(statement):
    return statement.options(selectinload(Order.items).selectinload(OrderItem.menu_item))


async def _fetch_order(db: AsyncSession, order_id: int) -> Order | None:
    result = await db.execute(_with_items(select(Order).where(Order.id == order_id)))
    return result.scalars().first()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def create_order(db: AsyncSession, order_data: OrderCreate) -> Order:
    # 1. Resolve every requested menu item; one unknown id rejects the order
    menu_item_ids = {line.menu_item_id for line in order_data.items}
    result = await db.execute(select(MenuItem).where(MenuItem.id.in_(menu_item_ids)))
    menu_items: dict[int, MenuItem] = {m.id: m for m in result.scalars().all()}

    missing = sorted(menu_item_ids - menu_items.keys())
    if missing:
        raise ValidationFailed(f"Menu items not found: {missing}", field="items")

    # 2. Price each line from the catalog, never from the client
    line_items: list[dict] = []
    total = ZERO
    for line in order_data.items:
        customizations = line.customizations
        if customizations is not None and customizations.is_empty():
            customizations = None
        price = unit_price(menu_items[line.menu_item_id].price, customizations)
        total += line_total(price, line.quantity)
        line_items.append(
            {
                "menu_item_id": line.menu_item_id,
                "quantity": line.quantity,
                "price_at_time": price,
                "customizations": (
                    customizations.model_dump(mode="json", by_alias=True)
                    if customizations is not None
                    else None
                ),
            }
        )

    # 3. Persist order + items in one transaction
    order = Order(
        customer_name=order_data.customer_name,
        customer_email=str(order_data.customer_email),
        customer_phone=order_data.customer_phone,
        status=OrderStatus.PENDING,
        total_amount=to_money(total),
    )
    db.add(order)
    await db.flush()  # obtain order.id before inserting items

    for line in line_items:
        db.add(OrderItem(order_id=order.id, **line))

    await db.commit()
    ORDERS_CREATED.inc()

    logger.info(
        "Order created",
        extra={
            "order_id": order.id,
            "amount": str(order.total_amount),
            "item_count": len(line_items),
        },
    )
    return order


async def list_kitchen_orders(db: AsyncSession) -> list[KitchenOrder]:
    """Every order with its items, oldest first."""
    result = await db.execute(_with_items(select(Order).order_by(Order.created_at, Order.id)))
    return [_build_kitchen_order(order) for order in result.scalars().all()]


async def list_recent_orders(db: AsyncSession, limit: int = 8) -> list[KitchenOrder]:
    result = await db.execute(
        _with_items(select(Order).order_by(Order.created_at.desc(), Order.id.desc()).limit(limit))
    )
    return [_build_kitchen_order(order) for order in result.scalars().all()]


async def list_customer_orders(db: AsyncSession, lookup: CustomerOrderLookup) -> list[KitchenOrder]:
    """
    Orders matching the supplied contact details exactly, newest first.

    When both email and phone are given an order must match both.
    """
    if lookup.email is None and lookup.phone is None:
        raise ValidationFailed("Email or phone is required", field="email")

    statement = select(Order)
    if lookup.email is not None:
        statement = statement.where(Order.customer_email == str(lookup.email))
    if lookup.phone is not None:
        statement = statement.where(Order.customer_phone == lookup.phone)

    result = await db.execute(
        _with_items(statement.order_by(Order.created_at.desc(), Order.id.desc()))
    )
    return [_build_kitchen_order(order) for order in result.scalars().all()]


async def get_kitchen_order(db: AsyncSession, order_id: int) -> KitchenOrder:
    order = await _fetch_order(db, order_id)
    if order is None:
        raise NotFound("Order not found")
    return _build_kitchen_order(order)


async def update_order_status(db: AsyncSession, order_id: int, status: OrderStatus) -> KitchenOrder:
    order = await _fetch_order(db, order_id)
    if order is None:
        raise NotFound("Order not found")

    previous = order.status
    if settings.enforce_forward_status_flow and not is_forward_step(previous, status):
        raise StateConflict(f"Cannot move order from {previous.value} to {status.value}")

    order.status = status
    await db.commit()
    ORDER_STATUS_UPDATES.labels(status.value).inc()

    logger.info(
        "Order status updated",
        extra={"order_id": order_id, "from_status": previous.value, "to_status": status.value},
    )
    return _build_kitchen_order(order)


async def delete_delivered_order(db: AsyncSession, order_id: int) -> None:
    order = await _fetch_order(db, order_id)
    if order is None:
        raise NotFound("Order not found")
    if order.status != OrderStatus.DELIVERED:
        raise StateConflict("Only delivered orders can be deleted")

    # Items go with the order through the delete-orphan cascade
    await db.delete(order)
    await db.commit()
    ORDERS_DELETED.inc()
    logger.info("Delivered order deleted", extra={"order_id": order_id})

