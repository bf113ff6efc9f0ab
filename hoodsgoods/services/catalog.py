from loguru import logger
from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession

from hoodsgoods.config import settings
from hoodsgoods.errors import NotFoundError, AuthorizationError
from hoodsgoods.models import Product, Store, CartItem
from hoodsgoods.schemas.products import ProductCreate, ProductFilter, ProductOut, ProductPage, ProductUpdate


SORT_COLUMNS = {
    "id": Product.id,
    "name": Product.name,
    "price": Product.price,
    "created_at": Product.created_at,
}

# Changing any of these sends the product back to moderation
REVIEWED_FIELDS = ("name", "description", "image_url")
NULLABLE_FIELDS = ("description", "image_url")


def page_limit(limit: int | None) -> int:
    if limit is None:
        return settings.default_page_size
    return min(limit, settings.max_page_size)


class CatalogService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    @staticmethod
    def _visible():
        return (
            select(Product)
            .join(Store, Store.id == Product.store_id)
            .where(Product.is_active.is_(True), Store.is_active.is_(True))
        )

    async def filter_products(self, criteria: ProductFilter) -> ProductPage:
        stmt = self._visible()
        if criteria.category:
            stmt = stmt.where(Product.category == criteria.category)
        if criteria.min_price is not None:
            stmt = stmt.where(Product.price >= criteria.min_price)
        if criteria.max_price is not None:
            stmt = stmt.where(Product.price <= criteria.max_price)
        if criteria.store_name:
            stmt = stmt.where(Product.store_name == criteria.store_name)
        if criteria.user_id:
            stmt = stmt.where(Product.user_id == criteria.user_id)

        total = (await self.db.execute(select(func.count()).select_from(stmt.subquery()))).scalar_one()

        column = SORT_COLUMNS[criteria.sort_by]
        order = column.desc() if criteria.sort_order == "desc" else column.asc()
        limit = page_limit(criteria.limit)
        rows = (
            await self.db.execute(stmt.order_by(order, Product.id).offset((criteria.page - 1) * limit).limit(limit))
        ).scalars().all()
        return ProductPage(
            items=[ProductOut.model_validate(p) for p in rows],
            total=total,
            page=criteria.page,
            limit=limit,
        )

    async def featured(self, limit: int = 5) -> list[Product]:
        stmt = self._visible().order_by(Product.created_at.desc(), Product.id.desc()).limit(page_limit(limit))
        return list((await self.db.execute(stmt)).scalars().all())

    async def get_product(self, product_id: int) -> Product:
        product = (await self.db.execute(self._visible().where(Product.id == product_id))).scalar_one_or_none()
        if product is None:
            raise NotFoundError(f"Product with ID {product_id} not found.")
        return product

    async def _own_store(self, user_id: str) -> Store:
        store = (await self.db.execute(select(Store).where(Store.user_id == user_id))).scalar_one_or_none()
        if store is None:
            raise NotFoundError(f"Cannot add product: No Store found for user ID {user_id}. Create a store first.")
        return store

    async def create_product(self, user_id: str, payload: ProductCreate) -> Product:
        store = await self._own_store(user_id)
        product = Product(
            **payload.model_dump(),
            user_id=user_id,
            store_id=store.id,
            store_name=store.store_name,
            is_active=False,
        )
        self.db.add(product)
        await self.db.commit()
        logger.bind(event="product.created", user_id=user_id).info(
            "Product {product_id} submitted for review", product_id=product.id
        )
        return product

    async def _owned(self, product_id: int, user_id: str) -> Product:
        product = await self.db.get(Product, product_id)
        if product is None:
            raise NotFoundError(f"Product with ID {product_id} not found.")
        if product.user_id != user_id:
            raise AuthorizationError("You are not authorized to modify this product.")
        return product

    async def update_product(self, product_id: int, user_id: str, payload: ProductUpdate) -> Product:
        product = await self._owned(product_id, user_id)
        changes = {
            k: v for k, v in payload.model_dump(exclude_unset=True).items()
            if v is not None or k in NULLABLE_FIELDS
        }
        resubmit = any(
            field in changes and changes[field] != getattr(product, field) for field in REVIEWED_FIELDS
        )
        for field, value in changes.items():
            setattr(product, field, value)
        if resubmit and product.is_active:
            product.is_active = False
            logger.bind(event="product.resubmitted", product_id=product_id).info("Product edited, back to pending")
        await self.db.commit()
        return product

    async def delete_product(self, product_id: int, user_id: str) -> None:
        product = await self._owned(product_id, user_id)
        await self.db.execute(delete(CartItem).where(CartItem.product_id == product.id))
        await self.db.delete(product)
        await self.db.commit()
        logger.bind(event="product.deleted", user_id=user_id).info("Product {product_id} deleted", product_id=product_id)
