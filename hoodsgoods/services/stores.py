from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hoodsgoods.errors import ConflictError, NotFoundError
from hoodsgoods.models import Product, Store, User, UserRole
from hoodsgoods.schemas.products import ProductOut
from hoodsgoods.schemas.stores import DeliveryDetails, StoreCreate, StoreOut, StoreUpdate, StoreWithProducts


class StoreService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _products(self, store_id: int, only_inactive: bool = False) -> list[Product]:
        stmt = select(Product).where(Product.store_id == store_id)
        if only_inactive:
            stmt = stmt.where(Product.is_active.is_(False))
        return list((await self.db.execute(stmt.order_by(Product.id))).scalars().all())

    async def _with_products(self, store: Store, only_inactive: bool = False) -> StoreWithProducts:
        products = await self._products(store.id, only_inactive=only_inactive)
        return StoreWithProducts(
            store=StoreOut.model_validate(store),
            products=[ProductOut.model_validate(p) for p in products],
        )

    async def create_store(self, user: User, payload: StoreCreate) -> StoreWithProducts:
        """Create a pending store together with its pending initial products."""
        existing = (await self.db.execute(select(Store).where(Store.user_id == user.id))).scalar_one_or_none()
        if existing is not None:
            raise ConflictError(f"User already has a store named '{existing.store_name}'.")

        store = Store(
            user_id=user.id,
            store_name=payload.store_name,
            standard_price=payload.standard_price,
            standard_time=payload.standard_time,
            express_price=payload.express_price,
            express_time=payload.express_time,
            is_active=False,
        )
        try:
            self.db.add(store)
            await self.db.flush()
            for item in payload.products:
                self.db.add(Product(
                    **item.model_dump(),
                    user_id=user.id,
                    store_id=store.id,
                    store_name=store.store_name,
                    is_active=False,
                ))
            if user.role == UserRole.BUYER:
                user.role = UserRole.SELLER
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        logger.bind(event="store.created", user_id=user.id).info(
            "Store {store_id} submitted with {n} products", store_id=store.id, n=len(payload.products)
        )
        return await self._with_products(store)

    async def get_store_by_user(self, user_id: str) -> Store:
        store = (await self.db.execute(select(Store).where(Store.user_id == user_id))).scalar_one_or_none()
        if store is None:
            raise NotFoundError("No store found for this user. Please create a store.")
        return store

    async def get_my_store(self, user_id: str) -> StoreWithProducts:
        return await self._with_products(await self.get_store_by_user(user_id))

    async def update_store(self, user_id: str, payload: StoreUpdate) -> Store:
        store = await self.get_store_by_user(user_id)
        changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
        new_name = changes.pop("store_name", None)
        if new_name is not None and new_name != store.store_name:
            if store.is_active:
                raise ConflictError("Store name cannot be changed after approval.")
            store.store_name = new_name
            await self.db.execute(
                update(Product).where(Product.store_id == store.id).values(store_name=new_name)
            )
        for field, value in changes.items():
            setattr(store, field, value)
        await self.db.commit()
        logger.bind(event="store.updated", store_id=store.id).info("Store delivery options updated")
        return store

    async def get_delivery_options(self, store_ids: list[int]) -> dict[int, DeliveryDetails]:
        if not store_ids:
            return {}
        stores = (await self.db.execute(select(Store).where(Store.id.in_(store_ids)))).scalars().all()
        return {s.id: DeliveryDetails.model_validate(s) for s in stores}

    async def list_active_stores(self) -> list[Store]:
        stmt = select(Store).where(Store.is_active.is_(True)).order_by(Store.store_name)
        return list((await self.db.execute(stmt)).scalars().all())

    async def list_stores(self) -> list[StoreWithProducts]:
        stores = (await self.db.execute(select(Store).order_by(Store.store_name))).scalars().all()
        return [await self._with_products(s) for s in stores]

    async def list_inactive_stores(self) -> list[StoreWithProducts]:
        stmt = select(Store).where(Store.is_active.is_(False)).order_by(Store.store_name)
        stores = (await self.db.execute(stmt)).scalars().all()
        return [await self._with_products(s, only_inactive=True) for s in stores]
