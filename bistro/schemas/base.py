from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, PlainSerializer
from pydantic.alias_generators import to_camel

# Money leaves the API as a two-decimal string, e.g. "36.00".
Money = Annotated[
    Decimal,
    PlainSerializer(lambda value: f"{value:.2f}", return_type=str, when_used="json"),
]


def _utc_iso(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"


# Stored timestamps are naive UTC; on the wire they carry the Z suffix.
UtcDateTime = Annotated[
    datetime,
    PlainSerializer(_utc_iso, return_type=str, when_used="json"),
]


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class ErrorBody(BaseModel):
    message: str
    field: str | None = None


def strip_text(value):
    return value.strip() if isinstance(value, str) else value


def blank_to_none(value):
    if isinstance(value, str):
        return value.strip() or None
    return value


def to_naive_utc(value: datetime) -> datetime:
    """Timestamps are stored naive in UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
