import sys

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from hoodsgoods.config import settings
from hoodsgoods.errors import (
    HoodsGoodsError,
    database_error_handler,
    hoodsgoods_error_handler,
    identity_provider_error_handler,
)


def configure_logging() -> None:
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level.upper())


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="HoodsGoods Marketplace API")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(HoodsGoodsError, hoodsgoods_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(httpx.HTTPError, identity_provider_error_handler)

    # Routers
    from hoodsgoods.routers.health import router as health_router  # local import to avoid circular deps
    from hoodsgoods.routers.auth import router as auth_router
    from hoodsgoods.routers.products import router as products_router
    from hoodsgoods.routers.stores import router as stores_router
    from hoodsgoods.routers.cart import router as cart_router
    from hoodsgoods.routers.orders import router as orders_router
    from hoodsgoods.routers.admin import router as admin_router
    from hoodsgoods.routers.content import router as content_router
    from hoodsgoods.routers.recommendations import router as recommendations_router
    from hoodsgoods.routers.reporting import router as reporting_router

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(products_router)
    app.include_router(stores_router)
    app.include_router(cart_router)
    app.include_router(orders_router)
    app.include_router(admin_router)
    app.include_router(content_router)
    app.include_router(recommendations_router)
    app.include_router(reporting_router)

    @app.on_event("startup")
    async def _on_startup() -> None:
        # Initialize database tables
        try:
            from hoodsgoods.db.init_db import init_db
            await init_db()
        except SQLAlchemyError as e:
            logger.bind(event="db_init_error", error=str(e)).error("Database initialization failed")
        logger.bind(event="startup", base_url=settings.base_url).info("HoodsGoods API started")

    @app.on_event("shutdown")
    async def _on_shutdown() -> None:
        from hoodsgoods.services.identity import identity_verifier
        await identity_verifier.close()
        logger.bind(event="shutdown").info("Identity client closed")

    return app


app = create_app()

# Run with: uvicorn hoodsgoods.main:app --reload
