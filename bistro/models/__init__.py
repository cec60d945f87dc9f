# Import all models here so SQLAlchemy registers them with Base.metadata
from bistro.models.catering import CateringInquiry
from bistro.models.menu import Category, MenuItem
from bistro.models.notice import Notice, NoticePriority
from bistro.models.order import ORDER_FLOW, Order, OrderItem, OrderStatus, is_forward_step

__all__ = [
    "CateringInquiry",
    "Category",
    "MenuItem",
    "Notice",
    "NoticePriority",
    "ORDER_FLOW",
    "Order",
    "OrderItem",
    "OrderStatus",
    "is_forward_step",
]
