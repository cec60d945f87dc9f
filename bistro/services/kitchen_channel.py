"""
Kitchen broadcast channel.

Connected kitchen displays receive the full kitchen order list when they connect
and again after every order mutation. Delivery is best effort: a connection that
fails a send is dropped from the registry and the broadcast moves on.
"""

import logging
from collections.abc import Callable

from fastapi import WebSocket
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.websockets import WebSocketDisconnect, WebSocketState

from bistro.metrics import KITCHEN_CONNECTIONS, KITCHEN_PUSHES
from bistro.schemas.events import KitchenOrdersMessage
from bistro.services import order_service

logger = logging.getLogger(__name__)


class KitchenConnectionRegistry:
    """The set of open kitchen display sockets."""

    def __init__(self) -> None:
        self._connections: set[WebSocket] = set()

    def add(self, websocket: WebSocket) -> None:
        self._connections.add(websocket)
        KITCHEN_CONNECTIONS.set(len(self._connections))

    def discard(self, websocket: WebSocket) -> None:
        self._connections.discard(websocket)
        KITCHEN_CONNECTIONS.set(len(self._connections))

    def snapshot(self) -> list[WebSocket]:
        # Sends may remove entries while a broadcast iterates
        return list(self._connections)

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, websocket: object) -> bool:
        return websocket in self._connections


class KitchenChannel:
    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        registry: KitchenConnectionRegistry | None = None,
    ) -> None:
        self._session_factory = session_factory
        self.registry = registry if registry is not None else KitchenConnectionRegistry()

    async def connect(self, websocket: WebSocket) -> None:
        """Accept a display and send it the current order list."""
        await websocket.accept()
        self.registry.add(websocket)
        logger.info("Kitchen display connected", extra={"connections": len(self.registry)})
        payload = await self._snapshot_payload()
        await self._send(websocket, payload)

    def disconnect(self, websocket: WebSocket) -> None:
        self.registry.discard(websocket)
        logger.info("Kitchen display disconnected", extra={"connections": len(self.registry)})

    async def broadcast(self) -> int:
        """Push the current order list to every display. Returns how many got it."""
        connections = self.registry.snapshot()
        if not connections:
            return 0
        payload = await self._snapshot_payload()
        delivered = 0
        for websocket in connections:
            if await self._send(websocket, payload):
                delivered += 1
        logger.debug(
            "Kitchen orders broadcast",
            extra={"delivered": delivered, "connections": len(connections)},
        )
        return delivered

    async def publish(self) -> None:
        """Broadcast after a mutation has been answered; failures only get logged."""
        try:
            await self.broadcast()
        except Exception:
            logger.exception("Failed to publish kitchen orders")

    async def _snapshot_payload(self) -> str:
        async with self._session_factory() as db:
            orders = await order_service.list_kitchen_orders(db)
        return KitchenOrdersMessage(data=orders).model_dump_json(by_alias=True)

    async def _send(self, websocket: WebSocket, payload: str) -> bool:
        if websocket.application_state != WebSocketState.CONNECTED:
            self._drop(websocket)
            return False
        try:
            await websocket.send_text(payload)
        except (WebSocketDisconnect, RuntimeError, OSError):
            self._drop(websocket)
            return False
        KITCHEN_PUSHES.labels("sent").inc()
        return True

    def _drop(self, websocket: WebSocket) -> None:
        KITCHEN_PUSHES.labels("dropped").inc()
        self.registry.discard(websocket)
