from datetime import datetime, timedelta

from loguru import logger
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from hoodsgoods.models import Order, Product, SellerOrder, SellerOrderItem, Store
from hoodsgoods.schemas.reporting import PopularProduct


class RecommendationService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def best_sellers(self, limit: int = 10, time_window_days: int = 30) -> list[PopularProduct]:
        """Publicly visible in-stock products ranked by units sold in the window."""
        since = datetime.utcnow() - timedelta(days=time_window_days)
        sales_count = func.sum(SellerOrderItem.quantity_ordered).label("sales_count")
        stmt = (
            select(Product, sales_count)
            .join(SellerOrderItem, SellerOrderItem.product_id == Product.id)
            .join(SellerOrder, SellerOrder.id == SellerOrderItem.seller_order_id)
            .join(Order, Order.id == SellerOrder.order_id)
            .join(Store, Store.id == Product.store_id)
            .where(
                Order.order_date >= since,
                Product.is_active.is_(True),
                Store.is_active.is_(True),
                Product.quantity > 0,
            )
            .group_by(Product.id)
            .order_by(sales_count.desc(), Product.id)
            .limit(limit)
        )
        rows = (await self.db.execute(stmt)).all()
        logger.bind(event="recommendations.best_sellers").debug(
            "{n} best sellers over {days} days", n=len(rows), days=time_window_days
        )
        return [
            PopularProduct(
                product_id=product.id,
                name=product.name,
                image_url=product.image_url,
                store_name=product.store_name,
                store_id=product.store_id,
                user_id=product.user_id,
                price=product.price,
                quantity=product.quantity,
                sales_count=int(count),
            )
            for product, count in rows
        ]
