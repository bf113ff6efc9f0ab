from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from hoodsgoods.models import StandardTime, ExpressTime
from hoodsgoods.schemas.products import ProductCreate, ProductOut


class StoreCreate(BaseModel):
    store_name: str = Field(min_length=1, max_length=255)
    standard_price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    standard_time: StandardTime
    express_price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    express_time: ExpressTime
    products: list[ProductCreate] = Field(min_length=1)


class StoreUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    store_name: str | None = Field(default=None, min_length=1, max_length=255)
    standard_price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    standard_time: StandardTime | None = None
    express_price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    express_time: ExpressTime | None = None


class StoreOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    store_name: str
    standard_price: Decimal
    standard_time: StandardTime
    express_price: Decimal
    express_time: ExpressTime
    is_active: bool
    created_at: datetime


class StoreWithProducts(BaseModel):
    store: StoreOut
    products: list[ProductOut]


class DeliveryOptionsRequest(BaseModel):
    store_ids: list[int] = Field(min_length=1)


class DeliveryDetails(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    store_id: int = Field(validation_alias="id")
    store_name: str
    standard_price: Decimal
    standard_time: StandardTime
    express_price: Decimal
    express_time: ExpressTime
