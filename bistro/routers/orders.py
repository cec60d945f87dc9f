import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Path, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from bistro.api import api
from bistro.database import get_db
from bistro.routers.deps import get_kitchen_channel, request_id
from bistro.schemas.order import (
    CustomerOrderLookup,
    KitchenOrder,
    OrderCreate,
    OrderRead,
    OrderStatusUpdate,
)
from bistro.services import order_service
from bistro.services.kitchen_channel import KitchenChannel

router = APIRouter()
logger = logging.getLogger(__name__)


@api.orders.create.route(router)
async def place_order(
    body: OrderCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    channel: KitchenChannel = Depends(get_kitchen_channel),
) -> OrderRead:
    logger.info(
        "Received place_order request",
        extra={
            "request_id": request_id(request),
            "customer_email": str(body.customer_email),
            "line_count": len(body.items),
        },
    )
    order = await order_service.create_order(db, body)
    background_tasks.add_task(channel.publish)
    return OrderRead.model_validate(order)


@api.orders.kitchen_list.route(router)
async def list_kitchen_orders(db: AsyncSession = Depends(get_db)) -> list[KitchenOrder]:
    return await order_service.list_kitchen_orders(db)


@api.orders.customer_list.route(router)
@api.orders.customer_lookup.route(router)
async def list_customer_orders(
    request: Request,
    email: list[str] | None = Query(default=None),
    phone: list[str] | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
) -> list[KitchenOrder]:
    # A repeated parameter counts once, by its first value
    lookup = CustomerOrderLookup(
        email=email[0] if email else None,
        phone=phone[0] if phone else None,
    )
    logger.info(
        "Received customer order lookup",
        extra={
            "request_id": request_id(request),
            "by_email": lookup.email is not None,
            "by_phone": lookup.phone is not None,
        },
    )
    return await order_service.list_customer_orders(db, lookup)


@api.orders.update_status.route(router)
async def update_order_status(
    body: OrderStatusUpdate,
    request: Request,
    background_tasks: BackgroundTasks,
    order_id: int = Path(gt=0),
    db: AsyncSession = Depends(get_db),
    channel: KitchenChannel = Depends(get_kitchen_channel),
) -> KitchenOrder:
    logger.info(
        "Received update_order_status request",
        extra={"request_id": request_id(request), "order_id": order_id, "status": body.status.value},
    )
    order = await order_service.update_order_status(db, order_id, body.status)
    background_tasks.add_task(channel.publish)
    return order


@api.orders.delete_delivered.route(router)
async def delete_delivered_order(
    request: Request,
    background_tasks: BackgroundTasks,
    order_id: int = Path(gt=0),
    db: AsyncSession = Depends(get_db),
    channel: KitchenChannel = Depends(get_kitchen_channel),
) -> Response:
    logger.info(
        "Received delete_delivered_order request",
        extra={"request_id": request_id(request), "order_id": order_id},
    )
    await order_service.delete_delivered_order(db, order_id)
    background_tasks.add_task(channel.publish)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
