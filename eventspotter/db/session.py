from typing import AsyncGenerator
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import declarative_base
from eventspotter.core.config import settings


def _engine_options(url: str) -> dict:
    options = {"echo": False, "future": True, "pool_pre_ping": True}
    # SQLite uses a single-connection pool; sizing options do not apply
    if not url.startswith("sqlite"):
        options.update(
            pool_size=20,              # Number of permanent connections to maintain
            max_overflow=10,           # Maximum number of connections to allow beyond pool_size
            pool_recycle=3600,         # Recycle connections after 1 hour (3600 seconds)
        )
    return options


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def register_sqlite_functions(async_engine: AsyncEngine) -> AsyncEngine:
    """
    Replace SQLite's ASCII-only lower() with Python's str.lower.

    Search and the title sort compare lower() of stored text against a term
    lowercased in Python, so both sides must fold case the same way.
    """
    if async_engine.dialect.name != "sqlite":
        return async_engine

    @event.listens_for(async_engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.create_function("lower", 1, _unicode_lower)

    return async_engine


engine = register_sqlite_functions(
    create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))
)
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
Base = declarative_base()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session
