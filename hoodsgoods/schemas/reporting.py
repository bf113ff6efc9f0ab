from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict


class TimePeriod(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class PopularProduct(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: int
    name: str
    image_url: str | None = None
    store_name: str
    store_id: int
    user_id: str
    price: Decimal
    quantity: int
    sales_count: int


class LowStockItem(BaseModel):
    product_id: int
    product_name: str
    current_quantity: int


class OutOfStockItem(BaseModel):
    product_id: int
    product_name: str


class InventoryItem(BaseModel):
    product_id: int
    product_name: str
    quantity: int
    price: Decimal
    category: str
    is_active: bool


class StockBreakdown(BaseModel):
    in_stock_percent: Decimal
    low_stock_percent: Decimal
    out_of_stock_percent: Decimal
    total_products: int


class InventoryStatus(BaseModel):
    low_stock_items: list[LowStockItem]
    out_of_stock_items: list[OutOfStockItem]
    full_inventory: list[InventoryItem]
    stock_breakdown: StockBreakdown
    report_generated_at: datetime


class SalesPoint(BaseModel):
    date: date
    sales: Decimal
    order_count: int


class SalesSummary(BaseModel):
    total_sales: Decimal
    average_daily_sales: Decimal
    period: TimePeriod
    start_date: date
    end_date: date


class SalesReport(BaseModel):
    sales_data: list[SalesPoint]
    summary: SalesSummary
    report_generated_at: datetime


class PlatformPoint(BaseModel):
    date: date
    total_sales: Decimal
    total_orders: int


class OverallPlatformMetrics(BaseModel):
    total_sales: Decimal
    total_orders: int
    average_order_value: Decimal
    total_active_sellers: int
    total_registered_buyers: int


class PeriodCovered(BaseModel):
    period: str
    start_date: date | None = None
    end_date: date | None = None


class PlatformMetrics(BaseModel):
    overall_metrics: OverallPlatformMetrics
    time_series_metrics: list[PlatformPoint]
    period_covered: PeriodCovered
    report_generated_at: datetime
