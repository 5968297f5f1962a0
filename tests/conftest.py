"""
Pytest configuration and shared fixtures.

Este módulo provee fixtures reutilizables para:
- Repositorios in-memory, reloj fijo y generador de ids predecible
- Casos de uso cableados contra esos adaptadores
- Sesión SQLite in-memory para los repositorios SQL
- Cliente HTTP de prueba (FastAPI TestClient)
"""

from decimal import Decimal
from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import _in_memory_bundle, build_use_cases
from app.application.dtos.listing_dto import ListingInput, ListingPatch
from app.application.interfaces.clock import FakeClock
from app.application.interfaces.id_generator import FakeIdGenerator
from app.config import Settings, get_settings
from app.domain.entities.listing import Listing, ListingStatus
from app.infrastructure.db.engine import build_engine, build_sessionmaker
from app.infrastructure.db.tables import metadata
from app.infrastructure.in_memory import (
    InMemoryBookingRepo,
    InMemoryListingRepo,
    InMemoryTransactionRepo,
    NoopTransactionManager,
    StubStripeGateway,
)
from tests.support import NOW, VENDOR_ID, WEBHOOK_SECRET

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ============================================================================
# ADAPTADORES IN-MEMORY
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture
def id_generator() -> FakeIdGenerator:
    return FakeIdGenerator()


@pytest.fixture
def listing_repo() -> InMemoryListingRepo:
    return InMemoryListingRepo()


@pytest.fixture
def booking_repo() -> InMemoryBookingRepo:
    return InMemoryBookingRepo()


@pytest.fixture
def transaction_repo() -> InMemoryTransactionRepo:
    return InMemoryTransactionRepo()


@pytest.fixture
def stripe_gateway() -> StubStripeGateway:
    return StubStripeGateway()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        use_in_memory=True,
        stripe_webhook_secret=WEBHOOK_SECRET,
        currency="usd",
        platform_fee_rate=Decimal("0.05"),
    )


@pytest.fixture
def use_cases(
    settings,
    listing_repo,
    booking_repo,
    transaction_repo,
    stripe_gateway,
    clock,
    id_generator,
) -> dict:
    """Todos los casos de uso cableados contra adaptadores in-memory."""
    return build_use_cases(
        settings=settings,
        listing_repo=listing_repo,
        booking_repo=booking_repo,
        transaction_repo=transaction_repo,
        stripe_gateway=stripe_gateway,
        tx_manager=NoopTransactionManager(),
        clock=clock,
        id_generator=id_generator,
    )


# ============================================================================
# FIXTURES DE DATOS DE PRUEBA
# ============================================================================

@pytest_asyncio.fixture
async def active_listing(use_cases) -> Listing:
    """Listing activo de VENDOR_ID con precio 100.00."""
    listing = await use_cases["create_listing"].execute(
        data=ListingInput(title="Guided kayak tour", price=Decimal("100.00")),
        vendor_id=VENDOR_ID,
    )
    return await use_cases["update_listing"].execute(
        listing_id=listing.id,
        patch=ListingPatch(status=ListingStatus.ACTIVE),
        requester_id=VENDOR_ID,
    )


# ============================================================================
# FIXTURES DE BASE DE DATOS
# ============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Engine SQLite in-memory con las tablas creadas."""
    engine = build_engine(Settings(database_url=TEST_DATABASE_URL))
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = build_sessionmaker(test_engine)
    async with session_factory() as session:
        yield session


# ============================================================================
# FIXTURES DE CLIENTE HTTP
# ============================================================================

@pytest.fixture
def client(monkeypatch) -> Generator[TestClient, None, None]:
    """
    TestClient con el cableado in-memory y un secreto de webhook conocido.
    Cada test arranca con repositorios vacíos.
    """
    from app.main import app

    monkeypatch.setenv("STRIPE_WEBHOOK_SECRET", WEBHOOK_SECRET)
    monkeypatch.setenv("USE_IN_MEMORY", "true")
    get_settings.cache_clear()
    _in_memory_bundle.cache_clear()

    with TestClient(app) as test_client:
        yield test_client

    get_settings.cache_clear()
    _in_memory_bundle.cache_clear()


# ============================================================================
# MARKERS DE PYTEST
# ============================================================================

def pytest_configure(config):
    """
    Configurar markers personalizados de pytest.
    """
    config.addinivalue_line(
        "markers",
        "integration: Tests de integración (repositorios SQL sobre SQLite y app completa)"
    )
    config.addinivalue_line(
        "markers",
        "circuit_breaker: Tests del circuit breaker de Stripe"
    )


# ============================================================================
# HOOKS DE PYTEST
# ============================================================================

@pytest.fixture(autouse=True)
def reset_circuit_breakers():
    """
    Reset circuit breakers antes de cada test.
    Evita que tests fallen por breakers abiertos de tests anteriores.
    """
    from app.infrastructure.circuit_breaker import stripe_breaker

    stripe_breaker.close()
    yield
    stripe_breaker.close()
