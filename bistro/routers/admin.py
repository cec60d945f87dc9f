import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Path, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from bistro.api import api
from bistro.config import settings
from bistro.database import get_db
from bistro.errors import Unauthorized
from bistro.routers.deps import get_kitchen_channel, request_id
from bistro.schemas.admin import AdminLogin, AdminLoginResult, AdminSessionRead, DashboardSummary
from bistro.schemas.catering import CateringInquiryRead
from bistro.schemas.menu import CategoryRead, CategoryWithItems, MenuItemCreate, MenuItemRead, MenuItemUpdate
from bistro.schemas.notice import NoticeCreate, NoticeRead, NoticeUpdate
from bistro.schemas.order import KitchenOrder, OrderStatusUpdate
from bistro.services import (
    admin_auth,
    catering_service,
    dashboard_service,
    menu_service,
    notice_service,
    order_service,
)
from bistro.services.kitchen_channel import KitchenChannel

logger = logging.getLogger(__name__)

# Login, logout and session probing must stay reachable without a session
public_router = APIRouter()
router = APIRouter(dependencies=[Depends(admin_auth.require_admin)])


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


@api.admin.login.route(public_router)
async def login(body: AdminLogin, request: Request, response: Response) -> AdminLoginResult:
    if not admin_auth.credentials_match(body.username, body.password):
        logger.warning(
            "Rejected admin login",
            extra={"request_id": request_id(request), "username": body.username},
        )
        raise Unauthorized("Invalid admin credentials")

    admin_auth.issue_session(response, body.username)
    logger.info("Admin logged in", extra={"request_id": request_id(request), "username": body.username})
    return AdminLoginResult(
        username=body.username,
        expires_in_seconds=settings.admin_session_ttl_seconds,
    )


@api.admin.logout.route(public_router)
async def logout() -> Response:
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    admin_auth.clear_session(response)
    return response


@api.admin.session.route(public_router)
async def current_session(
    session: AdminSessionRead = Depends(admin_auth.require_admin),
) -> AdminSessionRead:
    return session


# ---------------------------------------------------------------------------
# Dashboard & menu
# ---------------------------------------------------------------------------


@api.admin.dashboard.route(router)
async def dashboard(db: AsyncSession = Depends(get_db)) -> DashboardSummary:
    return await dashboard_service.build_summary(db)


@api.admin.menu.route(router)
async def admin_menu(db: AsyncSession = Depends(get_db)) -> list[CategoryWithItems]:
    categories = await menu_service.list_menu(db)
    return [CategoryWithItems.model_validate(category) for category in categories]


@api.admin.categories.route(router)
async def admin_categories(db: AsyncSession = Depends(get_db)) -> list[CategoryRead]:
    categories = await menu_service.list_categories(db)
    return [CategoryRead.model_validate(category) for category in categories]


@api.admin.create_menu_item.route(router)
async def create_menu_item(body: MenuItemCreate, db: AsyncSession = Depends(get_db)) -> MenuItemRead:
    item = await menu_service.create_menu_item(db, body)
    return MenuItemRead.model_validate(item)


@api.admin.update_menu_item.route(router)
async def update_menu_item(
    body: MenuItemUpdate,
    item_id: int = Path(gt=0),
    db: AsyncSession = Depends(get_db),
) -> MenuItemRead:
    item = await menu_service.update_menu_item(db, item_id, body)
    return MenuItemRead.model_validate(item)


# ---------------------------------------------------------------------------
# Notices
# ---------------------------------------------------------------------------


@api.admin.notices.route(router)
async def admin_notices(db: AsyncSession = Depends(get_db)) -> list[NoticeRead]:
    notices = await notice_service.list_all_notices(db)
    return [NoticeRead.model_validate(notice) for notice in notices]


@api.admin.create_notice.route(router)
async def create_notice(body: NoticeCreate, db: AsyncSession = Depends(get_db)) -> NoticeRead:
    notice = await notice_service.create_notice(db, body)
    return NoticeRead.model_validate(notice)


@api.admin.update_notice.route(router)
async def update_notice(
    body: NoticeUpdate,
    notice_id: int = Path(gt=0),
    db: AsyncSession = Depends(get_db),
) -> NoticeRead:
    notice = await notice_service.update_notice(db, notice_id, body)
    return NoticeRead.model_validate(notice)


@api.admin.delete_notice.route(router)
async def delete_notice(notice_id: int = Path(gt=0), db: AsyncSession = Depends(get_db)) -> Response:
    await notice_service.delete_notice(db, notice_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Orders & catering
# ---------------------------------------------------------------------------


@api.admin.orders.route(router)
async def admin_orders(db: AsyncSession = Depends(get_db)) -> list[KitchenOrder]:
    return await order_service.list_kitchen_orders(db)


@api.admin.order.route(router)
async def admin_order(order_id: int = Path(gt=0), db: AsyncSession = Depends(get_db)) -> KitchenOrder:
    return await order_service.get_kitchen_order(db, order_id)


@api.admin.update_order_status.route(router)
async def admin_update_order_status(
    body: OrderStatusUpdate,
    background_tasks: BackgroundTasks,
    order_id: int = Path(gt=0),
    db: AsyncSession = Depends(get_db),
    channel: KitchenChannel = Depends(get_kitchen_channel),
) -> KitchenOrder:
    order = await order_service.update_order_status(db, order_id, body.status)
    background_tasks.add_task(channel.publish)
    return order


@api.admin.delete_order.route(router)
async def admin_delete_order(
    background_tasks: BackgroundTasks,
    order_id: int = Path(gt=0),
    db: AsyncSession = Depends(get_db),
    channel: KitchenChannel = Depends(get_kitchen_channel),
) -> Response:
    await order_service.delete_delivered_order(db, order_id)
    background_tasks.add_task(channel.publish)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@api.admin.catering.route(router)
async def admin_catering(db: AsyncSession = Depends(get_db)) -> list[CateringInquiryRead]:
    inquiries = await catering_service.list_latest_inquiries(db)
    return [CateringInquiryRead.model_validate(inquiry) for inquiry in inquiries]
