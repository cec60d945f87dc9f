from datetime import datetime

from pydantic import AnyHttpUrl, Field, TypeAdapter, ValidationError, field_validator, model_validator

from bistro.models.notice import NoticePriority
from bistro.schemas.base import ApiModel, UtcDateTime, blank_to_none, strip_text, to_naive_utc

_HTTP_URL = TypeAdapter(AnyHttpUrl)


class NoticeRead(ApiModel):
    id: int
    title: str
    body: str
    priority: NoticePriority
    is_active: bool
    published_at: UtcDateTime
    expires_at: UtcDateTime | None
    action_label: str | None
    action_url: str | None
    created_at: UtcDateTime | None
    updated_at: UtcDateTime | None


class _NoticeFields(ApiModel):
    @field_validator("title", "body", mode="before", check_fields=False)
    @classmethod
    def _strip(cls, value):
        return strip_text(value)

    @field_validator("action_label", "action_url", mode="before", check_fields=False)
    @classmethod
    def _blank_to_none(cls, value):
        return blank_to_none(value)

    @field_validator("published_at", "expires_at", check_fields=False)
    @classmethod
    def _naive_utc(cls, value: datetime | None) -> datetime | None:
        return to_naive_utc(value) if value is not None else None

    @field_validator("action_url", check_fields=False)
    @classmethod
    def _http_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        try:
            _HTTP_URL.validate_python(value)
        except ValidationError:
            raise ValueError("Invalid url") from None
        return value


class NoticeCreate(_NoticeFields):
    title: str = Field(min_length=3, max_length=140)
    body: str = Field(min_length=8, max_length=3000)
    priority: NoticePriority = NoticePriority.NORMAL
    is_active: bool = True
    published_at: datetime | None = None
    expires_at: datetime | None = None
    action_label: str | None = Field(default=None, max_length=80)
    action_url: str | None = Field(default=None, max_length=2048)


class NoticeUpdate(_NoticeFields):
    title: str | None = Field(default=None, min_length=3, max_length=140)
    body: str | None = Field(default=None, min_length=8, max_length=3000)
    priority: NoticePriority | None = None
    is_active: bool | None = None
    published_at: datetime | None = None
    expires_at: datetime | None = None
    action_label: str | None = Field(default=None, max_length=80)
    action_url: str | None = Field(default=None, max_length=2048)

    @model_validator(mode="after")
    def _not_empty(self):
        if not self.model_fields_set:
            raise ValueError("At least one field is required")
        return self
