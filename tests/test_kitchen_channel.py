import json

from starlette.websockets import WebSocketState

from bistro.api import KITCHEN_SOCKET_PATH, api
from bistro.database import AsyncSessionLocal
from bistro.models.order import OrderStatus
from bistro.schemas.order import OrderCreate, OrderItemCreate
from bistro.services import order_service
from bistro.services.kitchen_channel import KitchenChannel, KitchenConnectionRegistry


def test_display_gets_snapshot_on_connect(client, place_order):
    order = place_order([{"menuItemId": 1, "quantity": 2}])

    with client.websocket_connect(KITCHEN_SOCKET_PATH) as ws:
        message = ws.receive_json()

    assert message["type"] == "kitchen:orders"
    assert [o["id"] for o in message["data"]] == [order["id"]]
    assert message["data"][0]["items"][0]["priceAtTime"] == "18.00"


def test_every_display_sees_mutations(client, place_order):
    with client.websocket_connect(KITCHEN_SOCKET_PATH) as first, client.websocket_connect(
        KITCHEN_SOCKET_PATH
    ) as second:
        assert first.receive_json()["data"] == []
        assert second.receive_json()["data"] == []

        order = place_order([{"menuItemId": 3, "quantity": 1}])
        for ws in (first, second):
            pushed = ws.receive_json()
            assert [(o["id"], o["status"]) for o in pushed["data"]] == [(order["id"], "pending")]

        client.patch(api.orders.update_status.url(order_id=order["id"]), json={"status": "delivered"})
        for ws in (first, second):
            assert ws.receive_json()["data"][0]["status"] == "delivered"

        client.delete(api.orders.delete_delivered.url(order_id=order["id"]))
        for ws in (first, second):
            assert ws.receive_json()["data"] == []


def test_messages_from_displays_are_ignored(client, place_order):
    with client.websocket_connect(KITCHEN_SOCKET_PATH) as ws:
        ws.receive_json()
        ws.send_text("hello kitchen")
        ws.send_bytes(b"\x00\x01")
        order = place_order([{"menuItemId": 4, "quantity": 1}])
        assert ws.receive_json()["data"][0]["id"] == order["id"]


def test_rejected_mutation_does_not_broadcast(client, place_order):
    order = place_order([{"menuItemId": 1, "quantity": 1}])
    with client.websocket_connect(KITCHEN_SOCKET_PATH) as ws:
        ws.receive_json()
        response = client.delete(api.orders.delete_delivered.url(order_id=order["id"]))
        assert response.status_code == 400

        client.patch(api.orders.update_status.url(order_id=order["id"]), json={"status": "ready"})
        # The next message is the status change, nothing came from the failed delete
        assert ws.receive_json()["data"][0]["status"] == "ready"


def test_admin_mutations_reach_displays(admin_client, place_order):
    order = place_order([{"menuItemId": 2, "quantity": 1}])
    with admin_client.websocket_connect(KITCHEN_SOCKET_PATH) as ws:
        ws.receive_json()

        admin_client.patch(
            api.admin.update_order_status.url(order_id=order["id"]), json={"status": "accepted"}
        )
        assert ws.receive_json()["data"][0]["status"] == "accepted"

        admin_client.patch(
            api.admin.update_order_status.url(order_id=order["id"]), json={"status": "delivered"}
        )
        assert ws.receive_json()["data"][0]["status"] == "delivered"

        assert admin_client.delete(api.admin.delete_order.url(order_id=order["id"])).status_code == 204
        assert ws.receive_json()["data"] == []


def test_pushed_timestamps_carry_the_utc_suffix(client, place_order):
    place_order([{"menuItemId": 1, "quantity": 1}])
    with client.websocket_connect(KITCHEN_SOCKET_PATH) as ws:
        assert ws.receive_json()["data"][0]["createdAt"].endswith("Z")


class _FakeSocket:
    def __init__(self, fail=False, state=WebSocketState.CONNECTED):
        self.fail = fail
        self.application_state = state
        self.sent: list[str] = []

    async def accept(self):
        pass

    async def send_text(self, payload: str):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(payload)


async def test_failed_sends_drop_the_connection(db):
    await order_service.create_order(
        db,
        OrderCreate(
            customer_name="Giulia Rossi",
            customer_email="giulia@example.com",
            customer_phone="5550100123",
            items=[OrderItemCreate(menu_item_id=1, quantity=1)],
        ),
    )
    registry = KitchenConnectionRegistry()
    channel = KitchenChannel(AsyncSessionLocal, registry)
    healthy, broken, closed = (
        _FakeSocket(),
        _FakeSocket(fail=True),
        _FakeSocket(state=WebSocketState.DISCONNECTED),
    )
    for socket in (healthy, broken, closed):
        registry.add(socket)

    delivered = await channel.broadcast()

    assert delivered == 1
    assert len(registry) == 1
    assert healthy in registry
    assert broken not in registry and closed not in registry
    payload = json.loads(healthy.sent[0])
    assert payload["type"] == "kitchen:orders"
    assert payload["data"][0]["status"] == OrderStatus.PENDING.value


async def test_broadcast_without_displays_is_a_no_op(db):
    assert await KitchenChannel(AsyncSessionLocal).broadcast() == 0


async def test_connect_registers_and_sends_snapshot(db):
    channel = KitchenChannel(AsyncSessionLocal)
    socket = _FakeSocket()

    await channel.connect(socket)

    assert socket in channel.registry
    assert json.loads(socket.sent[0]) == {"type": "kitchen:orders", "data": []}
    channel.disconnect(socket)
    assert len(channel.registry) == 0
