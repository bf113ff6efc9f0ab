from loguru import logger
from sqlalchemy.ext.asyncio import AsyncEngine

from hoodsgoods.db.session import engine as default_engine
from hoodsgoods.db.base import Base


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Create all tables (noop if they already exist via migrations)."""
    async with (engine or default_engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.bind(event="db_init").info("Database initialization completed")
