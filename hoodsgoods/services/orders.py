"""
Checkout and seller fulfilment.

A buyer order is split into one SellerOrder per store. Prices, delivery fees
and product names are frozen at checkout; stock is decremented and the
buyer's stored cart cleared in the same transaction.
"""
from collections import defaultdict
from decimal import Decimal

from loguru import logger
from sqlalchemy import Select, select, func, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hoodsgoods.errors import ConflictError, HoodsGoodsError, NotFoundError, ValidationFailed
from hoodsgoods.models import (
    CartItem,
    DeliveryMethod,
    Order,
    Product,
    SellerOrder,
    SellerOrderItem,
    SellerOrderStatus,
    Store,
)
from hoodsgoods.schemas.orders import CreateOrderRequest, OrderLine
from hoodsgoods.services.content import is_pickup_point

CENT = Decimal("0.01")


def locked_products(product_ids) -> Select:
    # Row locks hold stock steady between the check and the decrement.
    return select(Product).where(Product.id.in_(product_ids)).with_for_update()


def delivery_terms(store: Store, method: DeliveryMethod) -> tuple[Decimal, str]:
    if method == DeliveryMethod.EXPRESS:
        return Decimal(store.express_price), f"{store.express_time.value} days"
    return Decimal(store.standard_price), f"{store.standard_time.value} days"


class OrderService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _load(self, order_id: int) -> Order:
        stmt = select(Order).where(Order.id == order_id).execution_options(populate_existing=True)
        return (await self.db.execute(stmt)).scalar_one()

    async def create_order(self, buyer_id: str, payload: CreateOrderRequest) -> Order:
        if not is_pickup_point(payload.selected_area, payload.selected_pickup_point):
            raise ValidationFailed(
                f"Unknown pickup point '{payload.selected_pickup_point}' in area '{payload.selected_area}'."
            )

        by_store: dict[int, list[OrderLine]] = defaultdict(list)
        for line in payload.cart_items:
            by_store[line.store_id].append(line)

        missing = sorted(set(by_store) - set(payload.delivery_selections))
        if missing:
            raise ValidationFailed(f"Delivery method missing for stores: {', '.join(map(str, missing))}")

        product_ids = {line.product_id for line in payload.cart_items}
        products = {p.id: p for p in (await self.db.execute(locked_products(product_ids))).scalars()}
        stores = {s.id: s for s in (await self.db.execute(select(Store).where(Store.id.in_(by_store)))).scalars()}

        try:
            order = Order(
                user_id=buyer_id,
                grand_total=Decimal("0"),
                pickup_area=payload.selected_area,
                pickup_point=payload.selected_pickup_point,
                payment_reference=payload.payment_reference,
            )
            grand_total = Decimal("0")
            for store_id, lines in by_store.items():
                store = stores.get(store_id)
                if store is None or not store.is_active:
                    raise NotFoundError(f"Store with ID {store_id} not found.")

                items = []
                for line in lines:
                    product = products.get(line.product_id)
                    if product is None or not product.is_active or product.store_id != store_id:
                        raise NotFoundError(f"Product with ID {line.product_id} not found.")
                    if product.quantity < line.quantity:
                        raise ConflictError(
                            f"Insufficient stock for '{product.name}': {product.quantity} left, {line.quantity} requested."
                        )
                    if Decimal(product.price) != line.price_per_unit_snapshot:
                        logger.bind(event="order.price_changed", product_id=product.id).warning(
                            "Client price {client} differs from current price {current}",
                            client=line.price_per_unit_snapshot, current=product.price,
                        )
                    product.quantity -= line.quantity
                    items.append(SellerOrderItem(
                        product_id=product.id,
                        quantity_ordered=line.quantity,
                        price_per_unit=product.price,
                        product_name_snapshot=product.name,
                    ))

                method = payload.delivery_selections[store_id]
                delivery_price, estimate = delivery_terms(store, method)
                subtotal = sum((i.price_per_unit * i.quantity_ordered for i in items), Decimal("0")).quantize(CENT)
                seller_total = (subtotal + delivery_price).quantize(CENT)
                order.seller_orders.append(SellerOrder(
                    user_id=store.user_id,
                    store_id=store.id,
                    delivery_method=method,
                    delivery_price=delivery_price,
                    delivery_time_estimate=estimate,
                    items_subtotal=subtotal,
                    seller_total=seller_total,
                    status=SellerOrderStatus.PROCESSING,
                    items=items,
                ))
                grand_total += seller_total

            order.grand_total = grand_total
            if abs(grand_total - payload.frontend_grand_total) > CENT:
                logger.bind(event="order.total_mismatch", user_id=buyer_id).warning(
                    "Client total {client} differs from computed {server}",
                    client=payload.frontend_grand_total, server=grand_total,
                )
            self.db.add(order)
            await self.db.execute(delete(CartItem).where(CartItem.user_id == buyer_id))
            await self.db.commit()
        except (HoodsGoodsError, SQLAlchemyError):
            await self.db.rollback()
            raise

        logger.bind(event="order.created", user_id=buyer_id).info(
            "Order {order_id} placed with {n} seller orders, total={total}",
            order_id=order.id, n=len(by_store), total=grand_total,
        )
        return await self._load(order.id)

    async def find_buyer_orders(self, buyer_id: str) -> list[Order]:
        stmt = select(Order).where(Order.user_id == buyer_id).order_by(Order.order_date.desc(), Order.id.desc())
        return list((await self.db.execute(stmt)).scalars().all())

    async def find_seller_orders(self, seller_id: str) -> list[SellerOrder]:
        stmt = (
            select(SellerOrder)
            .where(SellerOrder.user_id == seller_id)
            .order_by(SellerOrder.created_at.desc(), SellerOrder.id.desc())
        )
        return list((await self.db.execute(stmt)).scalars().all())

    async def update_seller_order_status(
        self, seller_id: str, seller_order_id: int, status: SellerOrderStatus
    ) -> SellerOrder:
        stmt = select(SellerOrder).where(SellerOrder.id == seller_order_id, SellerOrder.user_id == seller_id)
        seller_order = (await self.db.execute(stmt)).scalar_one_or_none()
        if seller_order is None:
            raise NotFoundError(f"Seller order {seller_order_id} not found.")
        previous = seller_order.status
        seller_order.status = status
        await self.db.commit()
        logger.bind(event="order.status", seller_order_id=seller_order_id).info(
            "Status {old} -> {new}", old=previous.value, new=status.value
        )
        return seller_order

    async def seller_earnings(self, seller_id: str, status: SellerOrderStatus | None = None) -> Decimal:
        stmt = select(func.coalesce(func.sum(SellerOrder.seller_total), 0)).where(SellerOrder.user_id == seller_id)
        if status is not None:
            stmt = stmt.where(SellerOrder.status == status)
        value = (await self.db.execute(stmt)).scalar_one()
        return Decimal(str(value)).quantize(CENT)

