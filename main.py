from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import DBAPIError

from shared.config.database import Base, build_engine, build_sessionmaker
from shared.config.settings import Settings, get_settings
from shared.exceptions import register_exception_handlers
from shared.observability import setup_observability
from shared.security import limiter
from shared.storage import MemoryStore, StoreRegistry

# IMPORTANT: import models so they register with Base
from services.auth_service import models as auth_models  # noqa: F401
from services.cart_service import models as cart_models  # noqa: F401
from services.order_service import models as order_models  # noqa: F401
from services.payment_service import models as payment_models  # noqa: F401
from services.product_service import models as product_models  # noqa: F401
from services.review_service import models as review_models  # noqa: F401

from services.auth_service.router import router as auth_router
from services.cart_service.router import router as cart_router, wishlist_router
from services.order_service.router import router as order_router
from services.payment_service.router import (
    razorpay_router,
    router as transaction_router,
    stripe_router,
)
from services.product_service.mock_data import seed_catalog
from services.product_service.router import (
    category_router,
    public_router,
    router as product_router,
)
from services.review_service.router import router as review_router

logger = structlog.get_logger(__name__)

API_ROUTERS = (
    public_router,
    auth_router,
    product_router,
    category_router,
    order_router,
    cart_router,
    wishlist_router,
    review_router,
    transaction_router,
    stripe_router,
    razorpay_router,
)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="Storefront API",
        version="1.0.0",
        description="Catalogue, cart, orders and payment endpoints for the storefront.",
    )
    app.state.settings = settings
    app.state.stores = StoreRegistry(
        backend=settings.store_backend,
        memory=seed_catalog(MemoryStore()),
        fallback_enabled=settings.mock_fallback,
    )
    app.state.engine = None
    app.state.sessionmaker = None
    if settings.store_backend == "database":
        app.state.engine = build_engine(settings.database_url, echo=settings.sql_echo)
        app.state.sessionmaker = build_sessionmaker(app.state.engine)

    register_exception_handlers(app)

    # --- OBSERVABILITY BOOTSTRAP ---
    setup_observability(app, "storefront", settings)

    # Login is limited per client IP unless this app's settings switch it off
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    for router in API_ROUTERS:
        app.include_router(router, prefix="/api")

    @app.on_event("startup")
    async def startup_event() -> None:
        engine = app.state.engine
        if engine is None:
            logger.info("store_ready", backend="memory")
            return
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (DBAPIError, OSError) as exc:
            # Requests still work through the in-memory fallback when it is enabled
            logger.warning("schema_create_failed", error=str(exc), fallback=settings.mock_fallback)
        else:
            logger.info("store_ready", backend="database")

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        if app.state.engine is not None:
            await app.state.engine.dispose()

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=5000, reload=False)
