"""Database configuration and session management."""
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from offroad.config import get_settings

settings = get_settings()


def _engine_options() -> dict:
    """Pool settings for the configured backend.

    SQLite (development and tests) manages its own pool, so the PostgreSQL
    pool sizing and asyncpg connect_args only apply to PostgreSQL URLs.
    """
    if settings.is_sqlite:
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": 20,
        "max_overflow": 50,
        "pool_pre_ping": True,
        # Disable prepared statement caching for pgbouncer compatibility
        "connect_args": {
            "server_settings": {"jit": "off"},
            "prepared_statement_cache_size": 0,
        },
    }


engine = create_async_engine(
    settings.async_database_url,
    echo=False,  # Disable SQL query logging (too verbose)
    **_engine_options(),
)

# Create session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Base class for models
Base = declarative_base()


async def get_db() -> AsyncSession:
    """Dependency for getting database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
