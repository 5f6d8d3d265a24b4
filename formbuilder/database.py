"""Async database engine and session factory.

SQLite is used for local development and tests, PostgreSQL (asyncpg) in
production.
"""

from __future__ import annotations

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from .config import settings


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _engine_kwargs(url: str) -> dict:
    if _is_sqlite(url):
        return {}
    return {"pool_pre_ping": True}


engine = create_async_engine(
    settings.database_url, echo=settings.echo_sql, **_engine_kwargs(settings.database_url)
)

if _is_sqlite(settings.database_url):
    # form_fields and form_submissions rely on ON DELETE CASCADE
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


async_session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db():
    """FastAPI dependency that yields an async session per request."""
    async with async_session_factory() as session:
        yield session
