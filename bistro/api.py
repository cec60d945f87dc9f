"""
Route table for the whole HTTP surface.

Each operation is declared once here with its method, path, request schema,
response model and the error statuses it can answer with. Routers attach their
handlers with ``Operation.route`` through the ``api`` namespace; clients build URLs with
``Operation.url``.
"""

import inspect
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any

from fastapi import APIRouter, params, status
from pydantic import BaseModel

from bistro.schemas.admin import AdminLogin, AdminLoginResult, AdminSessionRead, DashboardSummary
from bistro.schemas.base import ErrorBody
from bistro.schemas.catering import CateringInquiryCreate, CateringInquiryRead
from bistro.schemas.menu import CategoryRead, CategoryWithItems, MenuItemCreate, MenuItemRead, MenuItemUpdate
from bistro.schemas.notice import NoticeCreate, NoticeRead, NoticeUpdate
from bistro.schemas.order import KitchenOrder, OrderCreate, OrderRead, OrderStatusUpdate


@dataclass(frozen=True)
class Operation:
    method: str
    path: str
    status_code: int = status.HTTP_200_OK
    input: type | None = None
    response_model: Any = None
    errors: tuple[int, ...] = field(default_factory=tuple)

    def url(self, **path_params: Any) -> str:
        return self.path.format(**path_params)

    def route(self, router: APIRouter, **kwargs: Any):
        register = router.api_route(
            self.path,
            methods=[self.method],
            status_code=self.status_code,
            response_model=self.response_model,
            responses={code: {"model": ErrorBody} for code in self.errors},
            **kwargs,
        )

        def decorator(handler):
            self.check_input(handler)
            return register(handler)

        return decorator

    def check_input(self, handler) -> None:
        """Fail at import time when a handler reads a different body than declared here."""
        bodies = [
            parameter.annotation
            for parameter in inspect.signature(handler).parameters.values()
            if isinstance(parameter.annotation, type)
            and issubclass(parameter.annotation, BaseModel)
            and not isinstance(parameter.default, params.Depends)
        ]
        expected = [self.input] if self.input is not None else []
        if bodies != expected:
            raise TypeError(
                f"{handler.__name__} reads {bodies} but {self.method} {self.path} declares {expected}"
            )


_400 = status.HTTP_400_BAD_REQUEST
_401 = status.HTTP_401_UNAUTHORIZED
_404 = status.HTTP_404_NOT_FOUND


class _MenuOperations:
    list = Operation("GET", "/api/menu", response_model=list[CategoryWithItems])


class _OrderOperations:
    create = Operation(
        "POST", "/api/orders", status.HTTP_201_CREATED, OrderCreate, OrderRead, (_400,)
    )
    kitchen_list = Operation("GET", "/api/orders/kitchen", response_model=list[KitchenOrder])
    customer_list = Operation(
        "GET", "/api/orders", response_model=list[KitchenOrder], errors=(_400,)
    )
    customer_lookup = Operation(
        "GET", "/api/orders/customer", response_model=list[KitchenOrder], errors=(_400,)
    )
    update_status = Operation(
        "PATCH",
        "/api/orders/{order_id}/status",
        input=OrderStatusUpdate,
        response_model=KitchenOrder,
        errors=(_400, _404),
    )
    delete_delivered = Operation(
        "DELETE", "/api/orders/{order_id}", status.HTTP_204_NO_CONTENT, errors=(_400, _404)
    )


class _CateringOperations:
    create = Operation(
        "POST",
        "/api/catering",
        status.HTTP_201_CREATED,
        CateringInquiryCreate,
        CateringInquiryRead,
        (_400,),
    )


class _NoticeOperations:
    list = Operation("GET", "/api/notices", response_model=list[NoticeRead])


class _AdminOperations:
    login = Operation(
        "POST", "/api/admin/login", input=AdminLogin, response_model=AdminLoginResult, errors=(_400, _401)
    )
    logout = Operation("POST", "/api/admin/logout", status.HTTP_204_NO_CONTENT)
    session = Operation("GET", "/api/admin/session", response_model=AdminSessionRead, errors=(_401,))
    dashboard = Operation("GET", "/api/admin/dashboard", response_model=DashboardSummary, errors=(_401,))
    menu = Operation("GET", "/api/admin/menu", response_model=list[CategoryWithItems], errors=(_401,))
    categories = Operation(
        "GET", "/api/admin/categories", response_model=list[CategoryRead], errors=(_401,)
    )
    create_menu_item = Operation(
        "POST",
        "/api/admin/menu-items",
        status.HTTP_201_CREATED,
        MenuItemCreate,
        MenuItemRead,
        (_400, _401, _404),
    )
    update_menu_item = Operation(
        "PATCH",
        "/api/admin/menu-items/{item_id}",
        input=MenuItemUpdate,
        response_model=MenuItemRead,
        errors=(_400, _401, _404),
    )
    notices = Operation("GET", "/api/admin/notices", response_model=list[NoticeRead], errors=(_401,))
    create_notice = Operation(
        "POST",
        "/api/admin/notices",
        status.HTTP_201_CREATED,
        NoticeCreate,
        NoticeRead,
        (_400, _401),
    )
    update_notice = Operation(
        "PATCH",
        "/api/admin/notices/{notice_id}",
        input=NoticeUpdate,
        response_model=NoticeRead,
        errors=(_400, _401, _404),
    )
    delete_notice = Operation(
        "DELETE",
        "/api/admin/notices/{notice_id}",
        status.HTTP_204_NO_CONTENT,
        errors=(_400, _401, _404),
    )
    orders = Operation("GET", "/api/admin/orders", response_model=list[KitchenOrder], errors=(_401,))
    order = Operation(
        "GET", "/api/admin/orders/{order_id}", response_model=KitchenOrder, errors=(_400, _401, _404)
    )
    update_order_status = Operation(
        "PATCH",
        "/api/admin/orders/{order_id}/status",
        input=OrderStatusUpdate,
        response_model=KitchenOrder,
        errors=(_400, _401, _404),
    )
    delete_order = Operation(
        "DELETE",
        "/api/admin/orders/{order_id}",
        status.HTTP_204_NO_CONTENT,
        errors=(_400, _401, _404),
    )
    catering = Operation(
        "GET", "/api/admin/catering", response_model=list[CateringInquiryRead], errors=(_401,)
    )


KITCHEN_SOCKET_PATH = "/ws/kitchen"

api = SimpleNamespace(
    menu=_MenuOperations,
    orders=_OrderOperations,
    catering=_CateringOperations,
    notices=_NoticeOperations,
    admin=_AdminOperations,
)
