from fastapi import Request

from bistro.services.kitchen_channel import KitchenChannel


def request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def get_kitchen_channel(request: Request) -> KitchenChannel:
    return request.app.state.kitchen_channel
