from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from bistro.schemas.base import ApiModel, UtcDateTime, strip_text, to_naive_utc


class CateringInquiryCreate(ApiModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    phone: str = Field(min_length=10, max_length=40)
    event_date: datetime
    guest_count: int = Field(ge=1, le=5000)
    message: str | None = Field(default=None, max_length=4000)

    @field_validator("name", "phone", "message", mode="before")
    @classmethod
    def _strip(cls, value):
        return strip_text(value)

    @field_validator("event_date")
    @classmethod
    def _naive_utc(cls, value: datetime) -> datetime:
        return to_naive_utc(value)


class CateringInquiryRead(ApiModel):
    id: int
    name: str
    email: str
    phone: str
    event_date: UtcDateTime
    guest_count: int
    message: str | None
    created_at: UtcDateTime | None
