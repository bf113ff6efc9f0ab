"""
Request-scoped dependencies: caller identity, authorization and the service
objects handed to routers.
"""
from typing import Awaitable, Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hoodsgoods.db.session import get_db_session
from hoodsgoods.errors import AuthenticationError, AuthorizationError
from hoodsgoods.models import User, UserRole
from hoodsgoods.schemas.auth import Claims
from hoodsgoods.services import policy
from hoodsgoods.services.cart import CartService
from hoodsgoods.services.catalog import CatalogService
from hoodsgoods.services.identity import IdentityVerifier, identity_verifier
from hoodsgoods.services.moderation import ModerationService
from hoodsgoods.services.orders import OrderService
from hoodsgoods.services.recommendations import RecommendationService
from hoodsgoods.services.reporting import ReportingService
from hoodsgoods.services.stores import StoreService
from hoodsgoods.services.users import UserService

bearer = HTTPBearer(auto_error=False)


def get_identity_verifier() -> IdentityVerifier:
    return identity_verifier


async def get_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> Claims:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authenticated")
    return await verifier.verify(credentials.credentials)


async def get_current_user(
    claims: Claims = Depends(get_claims),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    """Local user row for the verified subject, provisioned as a buyer on first sight."""
    user = await db.get(User, claims.sub)
    if user is None:
        user = User(id=claims.sub, email=claims.email, display_name=claims.name, role=UserRole.BUYER)
        db.add(user)
        try:
            await db.commit()
            logger.bind(event="user.provisioned", user_id=claims.sub).info("New user registered")
        except IntegrityError:
            # concurrent first request won the insert
            await db.rollback()
            user = (await db.execute(select(User).where(User.id == claims.sub))).scalar_one()
    if not user.is_active:
        raise AuthorizationError("Account is deactivated")
    return user


def require(action: str) -> Callable[..., Awaitable[User]]:
    """Dependency factory evaluating the role policy for ``action`` per request."""
    policy.allowed_roles(action)

    async def _dependency(user: User = Depends(get_current_user)) -> User:
        return policy.authorize(user, action)

    return _dependency


def get_catalog_service(db: AsyncSession = Depends(get_db_session)) -> CatalogService:
    return CatalogService(db)


def get_store_service(db: AsyncSession = Depends(get_db_session)) -> StoreService:
    return StoreService(db)


def get_cart_service(db: AsyncSession = Depends(get_db_session)) -> CartService:
    return CartService(db)


def get_order_service(db: AsyncSession = Depends(get_db_session)) -> OrderService:
    return OrderService(db)


def get_moderation_service(db: AsyncSession = Depends(get_db_session)) -> ModerationService:
    return ModerationService(db)


def get_user_service(db: AsyncSession = Depends(get_db_session)) -> UserService:
    return UserService(db)


def get_recommendation_service(db: AsyncSession = Depends(get_db_session)) -> RecommendationService:
    return RecommendationService(db)


def get_reporting_service(db: AsyncSession = Depends(get_db_session)) -> ReportingService:
    return ReportingService(db)
