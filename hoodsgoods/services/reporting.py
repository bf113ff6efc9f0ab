"""
Seller and platform reports.

Sales are bucketed per calendar day (UTC) of the order date. Seller sales count
item subtotals only and skip cancelled seller orders; platform sales use the
buyer-facing grand totals.
"""
from collections import defaultdict
from datetime import date, datetime, time, timedelta
from decimal import Decimal

from loguru import logger
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from hoodsgoods.config import settings
from hoodsgoods.models import Order, Product, SellerOrder, SellerOrderItem, SellerOrderStatus, Store, User, UserRole
from hoodsgoods.schemas.reporting import (
    InventoryItem,
    InventoryStatus,
    LowStockItem,
    OutOfStockItem,
    OverallPlatformMetrics,
    PeriodCovered,
    PlatformMetrics,
    PlatformPoint,
    SalesPoint,
    SalesReport,
    SalesSummary,
    StockBreakdown,
    TimePeriod,
)
from hoodsgoods.services.stores import StoreService

CENT = Decimal("0.01")

PERIOD_DAYS = {
    TimePeriod.DAILY: 1,
    TimePeriod.WEEKLY: 7,
    TimePeriod.MONTHLY: 30,
    TimePeriod.YEARLY: 365,
}


def period_window(period: TimePeriod, end: date | None = None) -> tuple[date, date]:
    """Inclusive first and last day of ``period`` ending on ``end`` (today by default)."""
    end = end or datetime.utcnow().date()
    return end - timedelta(days=PERIOD_DAYS[period] - 1), end


def _bounds(start: date, end: date) -> tuple[datetime, datetime]:
    return datetime.combine(start, time.min), datetime.combine(end + timedelta(days=1), time.min)


def _percent(part: int, whole: int) -> Decimal:
    if not whole:
        return Decimal("0.00")
    return (Decimal(part) * 100 / whole).quantize(CENT)


def _day(value) -> date:
    return value.date() if isinstance(value, datetime) else value


class ReportingService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def inventory_status(self, seller_id: str) -> InventoryStatus:
        store = await StoreService(self.db).get_store_by_user(seller_id)
        stmt = select(Product).where(Product.store_id == store.id).order_by(Product.quantity, Product.id)
        products = list((await self.db.execute(stmt)).scalars().all())

        low = [p for p in products if 0 < p.quantity < settings.low_stock_threshold]
        out = [p for p in products if p.quantity <= 0]
        total = len(products)
        return InventoryStatus(
            low_stock_items=[
                LowStockItem(product_id=p.id, product_name=p.name, current_quantity=p.quantity) for p in low
            ],
            out_of_stock_items=[OutOfStockItem(product_id=p.id, product_name=p.name) for p in out],
            full_inventory=[
                InventoryItem(
                    product_id=p.id,
                    product_name=p.name,
                    quantity=p.quantity,
                    price=p.price,
                    category=p.category,
                    is_active=p.is_active,
                )
                for p in products
            ],
            stock_breakdown=StockBreakdown(
                in_stock_percent=_percent(total - len(low) - len(out), total),
                low_stock_percent=_percent(len(low), total),
                out_of_stock_percent=_percent(len(out), total),
                total_products=total,
            ),
            report_generated_at=datetime.utcnow(),
        )

    async def sales_trends(self, seller_id: str, period: TimePeriod, end: date | None = None) -> SalesReport:
        await StoreService(self.db).get_store_by_user(seller_id)
        start, end = period_window(period, end)
        lower, upper = _bounds(start, end)
        stmt = (
            select(Order.order_date, SellerOrder.id, SellerOrderItem.quantity_ordered, SellerOrderItem.price_per_unit)
            .join(SellerOrder, SellerOrder.id == SellerOrderItem.seller_order_id)
            .join(Order, Order.id == SellerOrder.order_id)
            .where(
                SellerOrder.user_id == seller_id,
                SellerOrder.status != SellerOrderStatus.CANCELLED,
                Order.order_date >= lower,
                Order.order_date < upper,
            )
        )
        sales: dict[date, Decimal] = defaultdict(Decimal)
        orders: dict[date, set[int]] = defaultdict(set)
        for order_date, seller_order_id, quantity, price in (await self.db.execute(stmt)).all():
            day = _day(order_date)
            sales[day] += Decimal(str(price)) * quantity
            orders[day].add(seller_order_id)

        points = [
            SalesPoint(date=day, sales=sales[day].quantize(CENT), order_count=len(orders[day]))
            for day in sorted(sales)
        ]
        total = sum(sales.values(), Decimal("0")).quantize(CENT)
        logger.bind(event="reporting.sales_trends", user_id=seller_id).info(
            "{period} sales {start}..{end}: {total}", period=period.value, start=start, end=end, total=total
        )
        return SalesReport(
            sales_data=points,
            summary=SalesSummary(
                total_sales=total,
                average_daily_sales=(total / PERIOD_DAYS[period]).quantize(CENT),
                period=period,
                start_date=start,
                end_date=end,
            ),
            report_generated_at=datetime.utcnow(),
        )

    async def platform_metrics(self, period: TimePeriod | None = None) -> PlatformMetrics:
        """Marketplace-wide totals; ``period=None`` covers all recorded orders."""
        stmt = select(Order.order_date, Order.grand_total)
        if period is None:
            covered = PeriodCovered(period="allTime")
        else:
            start, end = period_window(period)
            lower, upper = _bounds(start, end)
            stmt = stmt.where(Order.order_date >= lower, Order.order_date < upper)
            covered = PeriodCovered(period=period.value, start_date=start, end_date=end)

        sales: dict[date, Decimal] = defaultdict(Decimal)
        counts: dict[date, int] = defaultdict(int)
        for order_date, grand_total in (await self.db.execute(stmt)).all():
            day = _day(order_date)
            sales[day] += Decimal(str(grand_total))
            counts[day] += 1

        total_sales = sum(sales.values(), Decimal("0")).quantize(CENT)
        total_orders = sum(counts.values())
        sellers = (await self.db.execute(select(func.count(Store.id)).where(Store.is_active.is_(True)))).scalar_one()
        buyers = (await self.db.execute(select(func.count(User.id)).where(User.role == UserRole.BUYER))).scalar_one()
        return PlatformMetrics(
            overall_metrics=OverallPlatformMetrics(
                total_sales=total_sales,
                total_orders=total_orders,
                average_order_value=(total_sales / total_orders).quantize(CENT) if total_orders else Decimal("0.00"),
                total_active_sellers=sellers,
                total_registered_buyers=buyers,
            ),
            time_series_metrics=[
                PlatformPoint(date=day, total_sales=sales[day].quantize(CENT), total_orders=counts[day])
                for day in sorted(sales)
            ],
            period_covered=covered,
            report_generated_at=datetime.utcnow(),
        )
