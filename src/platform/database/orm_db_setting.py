"""
SQLAlchemy async engine and session management with Read-Write Separation

This module provides:
1. AsyncEngineManager: Manages separate read/write engines with event loop awareness
2. Module-level accessors (get_engine / get_session_maker)
3. Database class (session provider for dependency injection)

Read-Write Separation:
- Write operations (holds, bookings, promotion): always use primary database
- Read operations (seat map, booking history): read replica if configured, else primary
- Transaction consistency: Within UoW, all operations use the write session

Bounded storage calls:
- pool_timeout caps the wait for a pooled connection
- On PostgreSQL, asyncpg command_timeout plus server-side statement_timeout and
  lock_timeout cap every statement, so a stuck row lock surfaces as an error
  instead of hanging a request
- On SQLite the write engine opens every transaction with BEGIN IMMEDIATE
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

import orjson
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


def _json_serializer(value: Any) -> str:
    return orjson.dumps(value).decode()


def _engine_kwargs(url: str, *, pool_size: int) -> dict[str, Any]:
    kwargs: dict[str, Any] = {
        'echo': False,
        'json_serializer': _json_serializer,
        'json_deserializer': orjson.loads,
    }
    if _is_sqlite(url):
        # SQLite (tests / local dev) has no server pool or statement timeouts
        return kwargs

    kwargs |= {
        'pool_size': pool_size,
        'max_overflow': settings.DB_POOL_MAX_OVERFLOW,
        'pool_timeout': settings.DB_POOL_TIMEOUT,
        'pool_recycle': settings.DB_POOL_RECYCLE,
        'pool_pre_ping': settings.DB_POOL_PRE_PING,
        'connect_args': {
            'command_timeout': settings.DB_COMMAND_TIMEOUT,
            'server_settings': {
                'statement_timeout': str(settings.DB_STATEMENT_TIMEOUT_MS),
                'lock_timeout': str(settings.DB_LOCK_TIMEOUT_MS),
            },
        },
    }
    return kwargs


def _is_sqlite(url: str) -> bool:
    return make_url(url).get_backend_name() == 'sqlite'


def _use_immediate_transactions(engine: AsyncEngine) -> None:
    """
    pysqlite defers BEGIN until the first DML and mishandles SAVEPOINT. Take over
    transaction control so every write transaction opens with BEGIN IMMEDIATE:
    writers queue on the database lock much like they queue on row locks in
    PostgreSQL, and savepoints nest inside a real transaction.
    """

    @event.listens_for(engine.sync_engine, 'connect')
    def _disable_driver_begin(dbapi_connection: Any, _connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, 'begin')
    def _begin_immediate(connection: Any) -> None:
        connection.exec_driver_sql('BEGIN IMMEDIATE')


# =============================================================================
# Event-loop-aware Engine Manager
# =============================================================================


class AsyncEngineManager:
    """
    Manages SQLAlchemy async engines with event loop awareness.

    Supports read-write separation:
    - Write engine: connects to primary database
    - Read engine: connects to read replica (falls back to primary if not configured)

    Ensures engines are always bound to the current event loop to prevent
    "Task got Future attached to a different loop" errors.
    """

    def __init__(self):
        self._write_engine: Optional[AsyncEngine] = None
        self._read_engine: Optional[AsyncEngine] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._write_session_maker: Optional[async_sessionmaker[AsyncSession]] = None
        self._read_session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    def get_engine(self, *, read_only: bool = False) -> AsyncEngine | None:
        """
        Get engine for current event loop, creating new one if needed

        Args:
            read_only: If True, return read engine (replica), otherwise write engine (primary)
        """
        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop running, create engine without loop tracking
            if read_only:
                if self._read_engine is None:
                    self._read_engine = self._create_read_engine()
                return self._read_engine
            if self._write_engine is None:
                self._write_engine = self._create_write_engine()
            return self._write_engine

        # If loop changed, drop old engines and create new ones
        if self._loop is not current_loop:
            if self._write_engine is not None or self._read_engine is not None:
                Logger.base.warning('🔄 [DB] Event loop changed, disposing old engines...')
                self.reset()

            Logger.base.info(f'🔗 [DB] Creating engines for event loop {id(current_loop)}')
            self._write_engine = self._create_write_engine()
            self._read_engine = self._create_read_engine()
            self._loop = current_loop

        return self._read_engine if read_only else self._write_engine

    def get_session_maker(self, *, read_only: bool = False) -> async_sessionmaker[AsyncSession]:
        """
        Get session maker for current event loop

        Args:
            read_only: If True, return read session maker, otherwise write session maker
        """
        self.get_engine(read_only=read_only)

        if read_only:
            if self._read_session_maker is None:
                self._read_session_maker = async_sessionmaker(
                    self._read_engine,
                    class_=AsyncSession,
                    expire_on_commit=False,
                )
            return self._read_session_maker
        if self._write_session_maker is None:
            self._write_session_maker = async_sessionmaker(
                self._write_engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._write_session_maker

    def reset(self) -> None:
        """Forget current engines (garbage collected); next access rebuilds them."""
        self._write_engine = None
        self._read_engine = None
        self._write_session_maker = None
        self._read_session_maker = None
        self._loop = None

    async def dispose(self) -> None:
        for engine in {self._write_engine, self._read_engine} - {None}:
            await engine.dispose()  # type: ignore[union-attr]
        self.reset()

    def _create_write_engine(self) -> AsyncEngine:
        url = settings.DATABASE_URL_ASYNC
        engine = create_async_engine(
            url, **_engine_kwargs(url, pool_size=settings.DB_POOL_SIZE_WRITE)
        )
        if _is_sqlite(url):
            _use_immediate_transactions(engine)
        return engine

    def _create_read_engine(self) -> AsyncEngine:
        url = settings.DATABASE_READ_URL_ASYNC
        return create_async_engine(url, **_engine_kwargs(url, pool_size=settings.DB_POOL_SIZE_READ))


# Global engine manager
_engine_manager = AsyncEngineManager()


def get_engine(*, read_only: bool = False) -> AsyncEngine | None:
    """Get event-loop-aware engine (read_only: use replica if available)"""
    return _engine_manager.get_engine(read_only=read_only)


def get_session_maker(*, read_only: bool = False) -> async_sessionmaker[AsyncSession]:
    """Get event-loop-aware session maker (read_only: use replica if available)"""
    return _engine_manager.get_session_maker(read_only=read_only)


async def dispose_engines() -> None:
    await _engine_manager.dispose()


# =============================================================================
# Base Model
# =============================================================================


class Base(DeclarativeBase):
    pass


# =============================================================================
# Table Creation
# =============================================================================


async def create_db_and_tables() -> None:
    """Create database tables if they don't exist (tests and local dev; prod runs alembic)"""
    # Register every model on Base.metadata
    import src.service.cinema.driven_adapter.model  # noqa: F401

    current_engine = get_engine()
    # pyrefly: ignore  # missing-attribute
    async with current_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)


# =============================================================================
# Database Class (for DI)
# =============================================================================


class Database:
    """
    Session provider for the dependency-injection container.

    Delegates to AsyncEngineManager for event-loop-aware engine management
    and read-write separation support.
    """

    def __init__(self, *, read_only: bool = False) -> None:
        self._read_only = read_only

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session_maker = get_session_maker(read_only=self._read_only)
        async with session_maker() as session:
            yield session
