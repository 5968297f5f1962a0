import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.errors import domain_error_handler, unhandled_error_handler
from app.api.routers.bookings import router as bookings_router
from app.api.routers.health import router as health_router
from app.api.routers.listings import router as listings_router
from app.api.routers.metrics import router as metrics_router
from app.api.routers.payments import router as payments_router
from app.config import get_settings
from app.domain.errors import DomainError
from app.infrastructure.db.engine import engine
from app.infrastructure.db.tables import metadata

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.use_in_memory:
        logger.info("Starting with in-memory storage")
    else:
        async with engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
        logger.info("Database tables ready")
    yield
    await engine.dispose()


app = FastAPI(
    title="Bookings API",
    description="Listings, time-slot bookings, Stripe payments and vendor metrics",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_exception_handler(DomainError, domain_error_handler)
app.add_exception_handler(Exception, unhandled_error_handler)

app.include_router(health_router, tags=["Health"])
app.include_router(listings_router, prefix="/api/v1", tags=["Listings"])
app.include_router(bookings_router, prefix="/api/v1", tags=["Bookings"])
app.include_router(payments_router, prefix="/api/v1", tags=["Payments"])
app.include_router(metrics_router, prefix="/api/v1", tags=["Metrics"])
