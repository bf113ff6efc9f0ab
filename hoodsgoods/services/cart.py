from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Protocol

from loguru import logger
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from hoodsgoods.errors import NotFoundError
from hoodsgoods.models import CartItem, Product, Store
from hoodsgoods.schemas.cart import CartItemCreate, CartItemOut, CartOut


class PricedLine(Protocol):
    price: Decimal
    quantity: int


def clamp_quantity(requested: int) -> int:
    """Cart lines never drop below one unit; removal is a separate operation."""
    return max(1, requested)


def cart_total(items: Iterable[PricedLine]) -> Decimal:
    total = sum((Decimal(item.price) * item.quantity for item in items), Decimal("0"))
    return total.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class CartService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _items(self, user_id: str) -> list[CartItem]:
        stmt = select(CartItem).where(CartItem.user_id == user_id).order_by(CartItem.created_at, CartItem.id)
        return list((await self.db.execute(stmt)).scalars().all())

    async def _line(self, user_id: str, product_id: int) -> CartItem | None:
        stmt = select(CartItem).where(CartItem.user_id == user_id, CartItem.product_id == product_id)
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def _visible_product(self, product_id: int) -> Product | None:
        stmt = (
            select(Product)
            .join(Store, Store.id == Product.store_id)
            .where(Product.id == product_id, Product.is_active.is_(True), Store.is_active.is_(True))
        )
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def get_cart(self, user_id: str) -> CartOut:
        items = await self._items(user_id)
        return CartOut(
            items=[CartItemOut.model_validate(i) for i in items],
            total_price=cart_total(items),
            total_quantity=sum(i.quantity for i in items),
        )

    async def _add(self, user_id: str, payload: CartItemCreate) -> CartItem | None:
        product = await self._visible_product(payload.product_id)
        if product is None:
            return None
        line = await self._line(user_id, product.id)
        if line is not None:
            line.quantity += payload.quantity
        else:
            line = CartItem(
                user_id=user_id,
                product_id=product.id,
                name=product.name,
                price=product.price,
                quantity=payload.quantity,
                image=product.image_url,
            )
            self.db.add(line)
        await self.db.flush()
        return line

    async def add_to_cart(self, user_id: str, payload: CartItemCreate) -> CartItem:
        line = await self._add(user_id, payload)
        if line is None:
            raise NotFoundError(f"Product {payload.product_id} not found")
        await self.db.commit()
        logger.bind(event="cart.add", user_id=user_id).info(
            "Product {product_id} in cart, quantity={quantity}", product_id=line.product_id, quantity=line.quantity
        )
        return line

    async def sync_cart(self, user_id: str, items: list[CartItemCreate]) -> CartOut:
        """Merge a client-side cart into the stored one."""
        skipped = []
        for entry in items:
            if await self._add(user_id, entry) is None:
                skipped.append(entry.product_id)
        await self.db.commit()
        if skipped:
            logger.bind(event="cart.sync.skipped", user_id=user_id).warning("Unavailable products skipped: {ids}", ids=skipped)
        return await self.get_cart(user_id)

    async def update_quantity(self, user_id: str, product_id: int, quantity: int) -> CartItem:
        line = await self._line(user_id, product_id)
        if line is None:
            raise NotFoundError("Item not found in cart")
        line.quantity = clamp_quantity(quantity)
        await self.db.commit()
        return line

    async def remove_from_cart(self, user_id: str, product_id: int) -> None:
        result = await self.db.execute(
            delete(CartItem).where(CartItem.user_id == user_id, CartItem.product_id == product_id)
        )
        if not result.rowcount:
            await self.db.rollback()
            raise NotFoundError("Item not found in cart")
        await self.db.commit()

    async def clear_cart(self, user_id: str) -> int:
        result = await self.db.execute(delete(CartItem).where(CartItem.user_id == user_id))
        if not result.rowcount:
            await self.db.rollback()
            raise NotFoundError("No items found in cart")
        await self.db.commit()
        logger.bind(event="cart.clear", user_id=user_id).info("Cart cleared, {n} lines", n=result.rowcount)
        return result.rowcount
