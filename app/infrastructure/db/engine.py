from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.config import Settings, get_settings

SQLITE_MEMORY_URL = "sqlite+aiosqlite:///:memory:"


def build_engine(settings: Settings) -> AsyncEngine:
    url = settings.database_url or SQLITE_MEMORY_URL
    if url.startswith("sqlite"):
        # Una base :memory: vive en una sola conexión compartida
        return create_async_engine(
            url,
            echo=settings.sql_echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(
        url,
        echo=settings.sql_echo,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(get_settings())
AsyncSessionLocal = build_sessionmaker(engine)
