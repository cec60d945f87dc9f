from pathlib import Path

import pytest
from fastapi import APIRouter, Depends

from bistro.api import Operation
from bistro.schemas.admin import AdminSessionRead
from bistro.schemas.order import OrderCreate, OrderStatusUpdate

_PROJECT_ROOT = Path(__file__).resolve().parent.parent


def _session() -> AdminSessionRead:
    raise AssertionError("never called")


def test_handler_with_the_declared_body_is_registered():
    router = APIRouter()
    operation = Operation("POST", "/things", input=OrderCreate)

    @operation.route(router)
    async def create(body: OrderCreate, session: AdminSessionRead = Depends(_session)):
        return None

    assert [route.path for route in router.routes] == ["/things"]


def test_handler_with_another_body_is_refused():
    router = APIRouter()
    operation = Operation("POST", "/things", input=OrderCreate)

    with pytest.raises(TypeError, match="/things"):

        @operation.route(router)
        async def create(body: OrderStatusUpdate):
            return None

    assert router.routes == []


def test_body_on_an_operation_without_input_is_refused():
    operation = Operation("GET", "/things")

    with pytest.raises(TypeError):

        @operation.route(APIRouter())
        async def read(body: OrderCreate):
            return None


def test_url_fills_path_parameters():
    assert Operation("PATCH", "/api/orders/{order_id}/status").url(order_id=7) == "/api/orders/7/status"


def test_namespace_packages_are_found_for_the_wheel():
    setuptools = pytest.importorskip("setuptools")

    packages = setuptools.find_namespace_packages(where=str(_PROJECT_ROOT), include=["bistro*"])

    assert {"bistro", "bistro.services", "bistro.routers", "bistro.schemas", "bistro.models"} <= set(packages)
