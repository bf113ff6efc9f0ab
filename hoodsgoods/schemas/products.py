from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


SortField = Literal["id", "name", "price", "created_at"]


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    category: str = Field(min_length=1, max_length=100)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    quantity: int = Field(ge=0, description="Stock on hand")
    image_url: str | None = Field(default=None, max_length=2048)


class ProductUpdate(BaseModel):
    """Owner edits. Moderation state is not settable here."""
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    category: str | None = Field(default=None, min_length=1, max_length=100)
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    quantity: int | None = Field(default=None, ge=0)
    image_url: str | None = Field(default=None, max_length=2048)


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    category: str
    price: Decimal
    quantity: int
    image_url: str | None = None
    user_id: str
    store_id: int
    store_name: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ProductFilter(BaseModel):
    category: str | None = None
    min_price: Decimal | None = Field(default=None, ge=0)
    max_price: Decimal | None = Field(default=None, ge=0)
    sort_by: SortField = "id"
    sort_order: Literal["asc", "desc"] = "asc"
    page: int = Field(default=1, ge=1)
    limit: int | None = Field(default=None, ge=1)
    store_name: str | None = None
    user_id: str | None = None

    @model_validator(mode="after")
    def _check_price_range(self) -> "ProductFilter":
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError("minPrice must not exceed maxPrice")
        return self


class ProductPage(BaseModel):
    items: list[ProductOut]
    total: int
    page: int
    limit: int
