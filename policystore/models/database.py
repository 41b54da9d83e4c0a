"""
Database engine setup.
"""

from pathlib import Path
from urllib.parse import urlparse

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from policystore.config import DatabaseConfig


def get_database_url(config: DatabaseConfig) -> str:
    """Get the synchronous database URL from config.

    Converts async URLs to sync URLs if needed.
    e.g., sqlite+aiosqlite:// -> sqlite://
          postgresql+asyncpg:// -> postgresql://
    """
    url = config.url

    if "+aiosqlite" in url:
        return url.replace("+aiosqlite", "")
    elif "+asyncpg" in url:
        return url.replace("+asyncpg", "")

    return url


def get_async_database_url(config: DatabaseConfig) -> str:
    """Get the async database URL from config.

    Converts sync URLs to async URLs if needed.
    e.g., sqlite:// -> sqlite+aiosqlite://
          postgresql:// -> postgresql+asyncpg://
    """
    url = config.url

    # Already async
    if "+aiosqlite" in url or "+asyncpg" in url:
        return url

    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://")
    elif url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://")

    return url


def _ensure_sqlite_parent_dir(url: str) -> None:
    """Ensure parent directory exists for a file-backed SQLite database."""
    if not url.startswith("sqlite"):
        return
    # Format: sqlite:///./data/policy.db or sqlite+aiosqlite:////abs/policy.db
    parsed = urlparse(url)
    path = parsed.path[1:] if parsed.path.startswith("/") else parsed.path
    if path and path != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)


def enable_sqlite_transactional_ddl(engine: Engine) -> None:
    """Make pysqlite/aiosqlite run DDL inside the surrounding transaction.

    The sqlite3 driver only emits BEGIN ahead of DML, so a DROP TABLE in
    ``engine.begin()`` would otherwise commit on its own.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_db_engine(config: DatabaseConfig) -> Engine:
    """Create a synchronous database engine."""
    url = get_database_url(config)
    _ensure_sqlite_parent_dir(url)
    engine = create_engine(url, echo=False)
    if url.startswith("sqlite"):
        enable_sqlite_transactional_ddl(engine)
    return engine


def create_async_db_engine(config: DatabaseConfig) -> AsyncEngine:
    """Create an async database engine."""
    url = get_async_database_url(config)
    _ensure_sqlite_parent_dir(url)
    engine = create_async_engine(url, echo=False)
    if url.startswith("sqlite"):
        enable_sqlite_transactional_ddl(engine.sync_engine)
    return engine
