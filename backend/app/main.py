"""Orders API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map OrdersError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Store, cache and scheduler built in the lifespan and torn down in reverse order

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Pending confirmations are cancelled on shutdown (orders stay PENDING, logged)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.routes import health, orders
from app.config import get_settings
from app.infrastructure.database import DatabaseSessionManager
from app.infrastructure.listing_cache import ResilientCache
from app.infrastructure.observability import setup_logging
from app.infrastructure.order_repository import SqlOrderStore
from app.infrastructure.redis_cache import RedisCacheBackend
from app.services.order_services import build_order_services

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db_manager = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    cache_backend = RedisCacheBackend.from_url(
        settings.redis_url, socket_timeout=settings.cache_socket_timeout_seconds,
    )
    services = build_order_services(
        SqlOrderStore(db_manager),
        ResilientCache(cache_backend),
        listing_ttl_seconds=settings.listing_cache_ttl_seconds,
        listing_default_limit=settings.listing_default_limit,
        confirmation_delay_seconds=settings.confirmation_delay_seconds,
    )
    app.state.db_manager = db_manager
    app.state.order_services = services
    if not await cache_backend.ping():
        logger.warning("Cache unreachable at startup; serving from store only")
    logger.info("Orders API started")
    yield
    logger.info("Orders API shutting down")
    await services.scheduler.shutdown()
    await cache_backend.close()
    await db_manager.dispose()


app = FastAPI(
    title="Orders API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(orders.router)

register_error_handlers(app)


@app.get("/", include_in_schema=False)
async def root():
    return {
        "message": "Orders API OK. Try GET /api/v1/orders or POST /api/v1/orders",
    }
