from decimal import Decimal

from pydantic import Field, field_validator, model_validator

from bistro.schemas.base import ApiModel, Money, strip_text


class MenuItemRead(ApiModel):
    id: int
    category_id: int
    name: str
    description: str
    price: Money
    image_url: str
    is_popular: bool
    is_vegetarian: bool
    is_spicy: bool


class CategoryRead(ApiModel):
    id: int
    name: str
    slug: str
    sort_order: int


class CategoryWithItems(CategoryRead):
    items: list[MenuItemRead]


class MenuItemCreate(ApiModel):
    category_id: int = Field(gt=0)
    name: str = Field(min_length=2, max_length=120)
    description: str = Field(min_length=4, max_length=1200)
    price: Decimal = Field(gt=0, le=9999)
    image_url: str | None = Field(default=None, max_length=8_000_000)
    is_popular: bool = False
    is_vegetarian: bool = False
    is_spicy: bool = False

    @field_validator("name", "description", "image_url", mode="before")
    @classmethod
    def _strip(cls, value):
        return strip_text(value)


class MenuItemUpdate(ApiModel):
    category_id: int | None = Field(default=None, gt=0)
    name: str | None = Field(default=None, min_length=2, max_length=120)
    description: str | None = Field(default=None, min_length=4, max_length=1200)
    price: Decimal | None = Field(default=None, gt=0, le=9999)
    image_url: str | None = Field(default=None, max_length=8_000_000)
    is_popular: bool | None = None
    is_vegetarian: bool | None = None
    is_spicy: bool | None = None

    @field_validator("name", "description", "image_url", mode="before")
    @classmethod
    def _strip(cls, value):
        return strip_text(value)

    @model_validator(mode="after")
    def _not_empty(self):
        if not self.model_fields_set:
            raise ValueError("At least one field is required")
        return self
