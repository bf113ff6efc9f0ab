from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from hoodsgoods.models import User, UserRole
from hoodsgoods.schemas.auth import Claims


class UserService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def register(self, user: User, claims: Claims) -> User:
        """Refresh the profile fields copied from the identity provider."""
        changed = False
        if claims.email and claims.email != user.email:
            user.email = claims.email
            changed = True
        if claims.name and claims.name != user.display_name:
            user.display_name = claims.name
            changed = True
        if changed:
            await self.db.commit()
            logger.bind(event="user.profile.updated", user_id=user.id).info("Profile refreshed from token claims")
        return user

    async def promote_to_seller(self, user: User) -> User:
        if user.role == UserRole.BUYER:
            user.role = UserRole.SELLER
            await self.db.commit()
            logger.bind(event="user.promoted", user_id=user.id).info("User promoted to seller")
        return user
