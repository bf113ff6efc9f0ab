from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from hoodsgoods.models import DeliveryMethod, SellerOrderStatus


class OrderLine(BaseModel):
    product_id: int
    quantity: int = Field(gt=0, description="Quantity must be a positive number")
    price_per_unit_snapshot: Decimal = Field(ge=0, description="Price at time of checkout")
    store_id: int


class CreateOrderRequest(BaseModel):
    cart_items: list[OrderLine] = Field(min_length=1, description="Cart cannot be empty")
    delivery_selections: dict[int, DeliveryMethod] = Field(description="store id -> delivery method")
    selected_area: str = Field(min_length=1)
    selected_pickup_point: str = Field(min_length=1)
    payment_reference: str | None = Field(default=None, description="Opaque id from the payment processor")
    frontend_grand_total: Decimal = Field(ge=0)


class UpdateSellerOrderStatus(BaseModel):
    status: SellerOrderStatus


class SellerOrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int | None = None
    quantity_ordered: int
    price_per_unit: Decimal
    product_name_snapshot: str | None = None


class SellerOrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    user_id: str
    store_id: int | None = None
    delivery_method: DeliveryMethod
    delivery_price: Decimal
    delivery_time_estimate: str | None = None
    items_subtotal: Decimal
    seller_total: Decimal
    status: SellerOrderStatus
    created_at: datetime
    updated_at: datetime
    items: list[SellerOrderItemOut]


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    order_date: datetime
    grand_total: Decimal
    pickup_area: str
    pickup_point: str
    payment_reference: str | None = None
    seller_orders: list[SellerOrderOut]


class EarningsOut(BaseModel):
    total_earnings: Decimal
