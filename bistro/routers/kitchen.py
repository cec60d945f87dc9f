from fastapi import APIRouter, WebSocket

from bistro.api import KITCHEN_SOCKET_PATH
from bistro.services.kitchen_channel import KitchenChannel

router = APIRouter()


@router.websocket(KITCHEN_SOCKET_PATH)
async def kitchen_socket(websocket: WebSocket) -> None:
    channel: KitchenChannel = websocket.app.state.kitchen_channel
    try:
        await channel.connect(websocket)
        # Displays only listen; whatever they send is ignored
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    finally:
        channel.disconnect(websocket)
