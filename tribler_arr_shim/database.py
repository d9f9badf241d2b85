"""
Database connection and session management.

SQLite Notes:
-------------
The association store lives in a single SQLite file.

1. WAL Mode (Write-Ahead Logging):
   - Enables concurrent reads during writes from parallel requests

2. NullPool:
   - Creates new connection for each operation (required for async SQLite)
   - SQLite handles concurrent access via file-level locking

3. Busy Timeout (5 seconds):
   - Prevents "database is locked" errors when two handlers write at once

4. Foreign keys:
   - Off by default in SQLite, switched on per connection so that
     torrent.category_id can never dangle
"""
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool
from loguru import logger

from tribler_arr_shim.config import settings
from tribler_arr_shim.constants import SQLITE_BUSY_TIMEOUT_MS

# Base class for models
Base = declarative_base()


def set_sqlite_pragma(dbapi_conn, connection_record):
    """
    Enable SQLite-specific settings on every new connection.
    - PRAGMA busy_timeout=5000: Wait up to 5s for locks to release
    - PRAGMA foreign_keys=ON: Enforce torrent -> category references
    - PRAGMA journal_mode=WAL: Use Write-Ahead Logging for better concurrency
    - PRAGMA synchronous=NORMAL: Balance between safety and performance for WAL mode
    """
    cursor = dbapi_conn.cursor()
    cursor.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS}")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.close()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine, wiring the SQLite pragmas when relevant."""
    engine = create_async_engine(
        database_url,
        echo=echo,
        poolclass=NullPool,
        future=True
    )
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", set_sqlite_pragma)
    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Session factory used by the association store."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False
    )


# Application-wide engine and session factory
engine = build_engine(settings.get_database_url(), echo=settings.debug)
AsyncSessionLocal = build_session_factory(engine)


async def init_db(target: AsyncEngine = None):
    """Create the category and torrent tables if they do not exist yet."""
    # Models must be imported so that they register on Base.metadata
    from tribler_arr_shim import models  # noqa: F401

    target = target or engine
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.debug(f"Schema ready: {', '.join(sorted(Base.metadata.tables))}")


async def checkpoint_wal(target: AsyncEngine = None):
    """
    Run a WAL checkpoint to consolidate the write-ahead log.
    Called on shutdown so the database file is self-contained.
    """
    target = target or engine
    if target.dialect.name != "sqlite":
        return
    try:
        async with target.begin() as conn:
            await conn.execute(text("PRAGMA wal_checkpoint(TRUNCATE)"))
            logger.debug("WAL checkpoint completed")
    except Exception as e:
        logger.warning(f"WAL checkpoint failed: {e}")


async def close_db(target: AsyncEngine = None):
    """Close database connections."""
    target = target or engine
    await checkpoint_wal(target)
    await target.dispose()
