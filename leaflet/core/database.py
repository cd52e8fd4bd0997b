"""
Database Configuration.

SQLAlchemy async engine and session management for the record store.
Uses lazy initialization so importing the package never touches the disk.
"""

from pathlib import Path
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from leaflet.core.logging import get_logger, log_with_source
from leaflet.models.base import Base

logger = get_logger(__name__)

# Module-level state for lazy initialization
_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def _casefold(value: str | None) -> str | None:
    return value.casefold() if value is not None else None


def configure_sqlite(engine: AsyncEngine, busy_timeout: int = 5000) -> None:
    """
    Enable foreign keys and a busy timeout on every new SQLite connection,
    and register the casefold() SQL function used by case-insensitive search.

    Foreign keys are off by default in SQLite; note_tags rows rely on them
    for ON DELETE CASCADE. SQLite's own lower() only folds ASCII letters.
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute(f"PRAGMA busy_timeout={int(busy_timeout)}")
        cursor.close()
        dbapi_connection.create_function("casefold", 1, _casefold, deterministic=True)


def build_engine(url: str, echo: bool = False, busy_timeout: int = 5000) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    The parent directory of a file-backed SQLite database is created
    when missing.

    Args:
        url: SQLAlchemy async database URL
        echo: Log emitted SQL
        busy_timeout: SQLite lock wait in milliseconds

    Returns:
        Configured async engine
    """
    if url.startswith("sqlite"):
        path = url.split(":///", 1)[-1]
        if path and path != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)

    engine = create_async_engine(url, echo=echo)
    configure_sqlite(engine, busy_timeout=busy_timeout)
    logger.debug("Database engine created", extra={"url": url})
    return engine


def _create_engine() -> AsyncEngine:
    """Create the configured async SQLAlchemy engine."""
    from leaflet.core.config import get_app_config, get_database_url

    db_config = get_app_config().database
    return build_engine(
        get_database_url(),
        echo=db_config.echo,
        busy_timeout=db_config.busy_timeout,
    )


def make_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to the given engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


def get_engine() -> AsyncEngine:
    """
    Get the database engine, creating it on first use.

    Returns:
        SQLAlchemy async engine instance
    """
    global _engine
    if _engine is None:
        _engine = _create_engine()
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Get the session factory, creating it on first use.

    Returns:
        SQLAlchemy async session factory
    """
    global _async_session_factory
    if _async_session_factory is None:
        _async_session_factory = make_session_factory(get_engine())
    return _async_session_factory


async def init_database(engine: AsyncEngine | None = None) -> None:
    """
    Create the record store tables if they do not exist yet.

    Args:
        engine: Engine to initialize; defaults to the configured engine
    """
    # Registers the note tables on Base.metadata
    import leaflet.models.note  # noqa: F401

    target = engine or get_engine()
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    log_with_source(
        logger,
        "store",
        "debug",
        "Record store schema ready",
        tables=sorted(Base.metadata.tables),
    )


async def dispose_engine() -> None:
    """Dispose the configured engine and forget the session factory."""
    global _engine, _async_session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.debug("Database engine disposed")
    _engine = None
    _async_session_factory = None
