from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bistro.models.catering import CateringInquiry
from bistro.models.menu import Category, MenuItem
from bistro.models.order import Order
from bistro.schemas.admin import DashboardCounts, DashboardSummary
from bistro.services import notice_service, order_service


async def _count(db: AsyncSession, model) -> int:
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar_one()


async def build_summary(db: AsyncSession) -> DashboardSummary:
    counts = DashboardCounts(
        menu_items=await _count(db, MenuItem),
        categories=await _count(db, Category),
        orders=await _count(db, Order),
        active_notices=await notice_service.count_active_notices(db),
        catering_inquiries=await _count(db, CateringInquiry),
    )
    return DashboardSummary(
        counts=counts,
        recent_orders=await order_service.list_recent_orders(db, limit=8),
    )
