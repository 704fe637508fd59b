import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from drawreg.core.errors import TransactionAbortError
from drawreg.settings import Settings

logger = logging.getLogger(__name__)


def build_engine(url: str, settings: Settings | None = None) -> AsyncEngine:
    """
    Create the async engine. The caller owns its lifecycle (dispose at shutdown).

    On SQLite every transaction starts with BEGIN IMMEDIATE so concurrent
    writers queue on the database lock instead of failing mid-transaction.
    """
    echo = settings.APP_DEBUG if settings else False
    if url.startswith("sqlite"):
        timeout = settings.SQLITE_BUSY_TIMEOUT if settings else 30.0
        engine = create_async_engine(url, echo=echo, connect_args={"timeout": timeout})

        @event.listens_for(engine.sync_engine, "connect")
        def _disable_implicit_begin(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(engine.sync_engine, "begin")
        def _begin_immediate(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

        return engine

    return create_async_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE if settings else 10,
        max_overflow=settings.DB_MAX_OVERFLOW if settings else 20,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
    )


def dialect_name(session: AsyncSession) -> str:
    return session.get_bind().dialect.name


@asynccontextmanager
async def get_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """One transaction: commit on success, roll back on any exception."""
    async with session_factory() as session:
        try:
            async with session.begin():
                yield session
        except DBAPIError as exc:
            logger.error("Transaction rolled back after store failure: %s", exc.__class__.__name__)
            raise TransactionAbortError("The operation failed and was rolled back") from exc
