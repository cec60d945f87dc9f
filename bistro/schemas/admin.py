from pydantic import Field

from bistro.schemas.base import ApiModel, UtcDateTime
from bistro.schemas.order import KitchenOrder


class AdminLogin(ApiModel):
    username: str = Field(min_length=2, max_length=80)
    password: str = Field(min_length=6, max_length=256)


class AdminLoginResult(ApiModel):
    username: str
    expires_in_seconds: int


class AdminSessionRead(ApiModel):
    username: str
    expires_at: UtcDateTime


class DashboardCounts(ApiModel):
    menu_items: int
    categories: int
    orders: int
    active_notices: int
    catering_inquiries: int


class DashboardSummary(ApiModel):
    counts: DashboardCounts
    recent_orders: list[KitchenOrder]
