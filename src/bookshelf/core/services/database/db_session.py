"""Async database engine and per-call connection scoping."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from src.bookshelf.core.errors import unknown
from src.bookshelf.runtime.config.config_data import DatabaseConfig


@asynccontextmanager
async def connection_scope(engine: AsyncEngine) -> AsyncIterator[AsyncConnection]:
    """Check one connection out of ``engine``'s pool for the duration of a call.

    Acquisition failures become Unknown errors. The connection goes back to
    the pool on every exit path; work not committed inside the block is
    rolled back.
    """
    connection = engine.connect()
    try:
        await connection.start()
    except SQLAlchemyError as exc:
        raise unknown(f"failed to connect to database: {exc}") from exc

    try:
        yield connection
    finally:
        await connection.close()


class DbSessionService:
    def __init__(self, db_config: DatabaseConfig, environment: str = "development"):
        """Build the shared engine and its connection pool."""
        logger.info("Configuring database engine for environment: {}", environment)

        engine_kwargs: dict[str, Any] = {
            "echo": db_config.echo,
            "connect_args": self._get_connect_args(db_config),
        }

        if db_config.is_memory:
            # Every connection to an in-memory SQLite database sees a different
            # database, so the pool holds exactly one.
            engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs.update(
                {
                    "pool_size": db_config.pool_size,
                    "max_overflow": db_config.max_overflow,
                    "pool_timeout": db_config.pool_timeout,
                    "pool_recycle": db_config.pool_recycle,
                    "pool_pre_ping": True,
                }
            )

        if db_config.is_sqlite and environment == "production":
            logger.warning(
                "SQLite is not recommended for production use. "
                "Consider PostgreSQL for better performance and reliability."
            )

        self._engine = create_async_engine(db_config.url, **engine_kwargs)
        logger.info(
            "Database engine initialized",
            pool_size=None if db_config.is_memory else db_config.pool_size,
            max_overflow=None if db_config.is_memory else db_config.max_overflow,
        )

    @staticmethod
    def _get_connect_args(db_config: DatabaseConfig) -> dict:
        """Get driver-specific connection arguments."""
        if db_config.is_sqlite:
            return {"check_same_thread": False, "timeout": 20}
        if "postgresql" in db_config.url:
            return {"server_settings": {"application_name": "bookshelf", "jit": "off"}}
        return {}

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    def connection_scope(self):
        """Per-call connection from the shared pool, see ``connection_scope``."""
        return connection_scope(self._engine)

    async def health_check(self) -> bool:
        """Perform a round trip to the database."""
        try:
            async with self.connection_scope() as connection:
                await connection.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.error(
                "Database health check failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return False

    def get_pool_status(self) -> dict:
        """Get current connection pool status for monitoring."""
        pool = self._engine.pool
        return {
            "size": getattr(pool, "size", lambda: 0)(),
            "checked_in": getattr(pool, "checkedin", lambda: 0)(),
            "checked_out": getattr(pool, "checkedout", lambda: 0)(),
            "overflow": getattr(pool, "overflow", lambda: 0)(),
        }

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self._engine.dispose()
        logger.info("Database engine disposed")
