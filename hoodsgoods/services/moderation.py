"""
Admin moderation workflow.

Products and stores move Pending -> Active on approval, or are deleted on
rejection. Every effective decision appends an AdminAction row inside the
same transaction as the state change.
"""
from loguru import logger
from sqlalchemy import select, func, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hoodsgoods.config import settings
from hoodsgoods.errors import ConflictError, NotFoundError
from hoodsgoods.models import AdminAction, AdminActionType, CartItem, Product, Store, User, UserRole
from hoodsgoods.schemas.admin import AdminActionOut, AdminActionPage
from hoodsgoods.services.catalog import page_limit


class ModerationService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    def _record(self, admin_id: str, action_type: AdminActionType, target_id: int | str, details: str | None = None) -> None:
        self.db.add(AdminAction(action_type=action_type, target_id=str(target_id), details=details, admin_id=admin_id))

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    # Products

    async def pending_products(self) -> list[Product]:
        stmt = select(Product).where(Product.is_active.is_(False)).order_by(Product.id)
        return list((await self.db.execute(stmt)).scalars().all())

    async def inactive_products_of_active_stores(self) -> list[Product]:
        """Pending products that are ready for review because their store is live."""
        stmt = (
            select(Product)
            .join(Store, Store.id == Product.store_id)
            .where(Product.is_active.is_(False), Store.is_active.is_(True))
            .order_by(Product.id)
        )
        return list((await self.db.execute(stmt)).scalars().all())

    async def approve_product(self, admin_id: str, product_id: int) -> Product:
        product = await self.db.get(Product, product_id)
        if product is None:
            raise NotFoundError(f"Product with ID {product_id} not found.")
        if product.is_active:
            return product
        if settings.require_active_store_for_product_approval:
            store = await self.db.get(Store, product.store_id)
            if store is None or not store.is_active:
                raise ConflictError("Product cannot be approved while its store is pending approval.")
        product.is_active = True
        self._record(admin_id, AdminActionType.APPROVE_PRODUCT, product.id, f"Approved product '{product.name}'")
        await self._commit()
        logger.bind(event="moderation.product.approved", admin_id=admin_id).info("Product {id} approved", id=product_id)
        return product

    async def reject_product(self, admin_id: str, product_id: int, reason: str | None = None) -> None:
        product = await self.db.get(Product, product_id)
        if product is None:
            raise NotFoundError(f"Product with ID {product_id} not found.")
        details = f"Rejected product '{product.name}'" + (f": {reason}" if reason else "")
        await self.db.execute(delete(CartItem).where(CartItem.product_id == product.id))
        await self.db.delete(product)
        self._record(admin_id, AdminActionType.REJECT_PRODUCT, product_id, details)
        await self._commit()
        logger.bind(event="moderation.product.rejected", admin_id=admin_id).info("Product {id} rejected", id=product_id)

    # Stores

    async def approve_store(self, admin_id: str, store_id: int) -> Store:
        store = await self.db.get(Store, store_id)
        if store is None:
            raise NotFoundError(f"Store with ID {store_id} not found.")
        if store.is_active:
            return store
        store.is_active = True
        self._record(admin_id, AdminActionType.APPROVE_STORE, store.id, f"Approved store '{store.store_name}'")
        await self._commit()
        logger.bind(event="moderation.store.approved", admin_id=admin_id).info("Store {id} approved", id=store_id)
        return store

    async def reject_store(self, admin_id: str, store_id: int, reason: str | None = None) -> None:
        """Delete the store with everything hanging off it, as one unit."""
        store = await self.db.get(Store, store_id)
        if store is None:
            raise NotFoundError(f"Store with ID {store_id} not found.")
        product_ids = select(Product.id).where(Product.store_id == store.id)
        try:
            await self.db.execute(delete(CartItem).where(CartItem.product_id.in_(product_ids)))
            removed = await self.db.execute(delete(Product).where(Product.store_id == store.id))
            await self.db.delete(store)
            owner = await self.db.get(User, store.user_id)
            if owner is not None and owner.role == UserRole.SELLER:
                owner.role = UserRole.BUYER
            details = f"Rejected store '{store.store_name}' and {removed.rowcount} products" + (f": {reason}" if reason else "")
            self._record(admin_id, AdminActionType.REJECT_STORE, store_id, details)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.bind(event="moderation.store.reject_failed", store_id=store_id).error("Store rejection rolled back")
            raise
        logger.bind(event="moderation.store.rejected", admin_id=admin_id).info("Store {id} rejected", id=store_id)

    # Users

    async def list_users(self) -> list[User]:
        return list((await self.db.execute(select(User).order_by(User.created_at, User.id))).scalars().all())

    async def deactivate_user(self, admin_id: str, user_id: str) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found.")
        if user.id == admin_id:
            raise ConflictError("Admins cannot deactivate themselves.")
        if not user.is_active:
            return user
        user.is_active = False
        self._record(admin_id, AdminActionType.DEACTIVATE_USER, user.id, "User deactivated")
        await self._commit()
        logger.bind(event="moderation.user.deactivated", admin_id=admin_id).info("User {id} deactivated", id=user_id)
        return user

    # Audit log

    async def list_actions(self, page: int = 1, limit: int | None = None) -> AdminActionPage:
        size = page_limit(limit)
        total = (await self.db.execute(select(func.count()).select_from(AdminAction))).scalar_one()
        rows = (
            await self.db.execute(
                select(AdminAction).order_by(AdminAction.created_at.desc(), AdminAction.id.desc())
                .offset((page - 1) * size).limit(size)
            )
        ).scalars().all()
        return AdminActionPage(items=[AdminActionOut.model_validate(a) for a in rows], total=total, page=page, limit=size)
