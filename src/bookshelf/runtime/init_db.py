"""Database initialization script."""

import asyncio

from src.bookshelf.core.services.database.db_manage import create_all
from src.bookshelf.core.services.database.db_session import DbSessionService
from src.bookshelf.runtime.context import get_config


async def init_db() -> None:
    """Create all database tables for the configured database."""
    config = get_config()
    database_service = DbSessionService(config.database, config.app.environment)
    try:
        await create_all(database_service.engine)
    finally:
        await database_service.dispose()


if __name__ == "__main__":
    asyncio.run(init_db())
