from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class CartItemCreate(BaseModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)


class CartItemUpdate(BaseModel):
    # Non-positive values are accepted and clamped to 1 by the service
    quantity: int


class CartSync(BaseModel):
    items: list[CartItemCreate]


class CartItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    product_id: int
    name: str
    price: Decimal
    quantity: int
    image: str | None = None
    created_at: datetime
    updated_at: datetime


class CartOut(BaseModel):
    items: list[CartItemOut]
    total_price: Decimal
    total_quantity: int
