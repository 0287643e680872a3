"""Table bootstrap for development and test databases."""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlmodel import SQLModel


async def create_all(engine: AsyncEngine) -> None:
    """Create all missing tables."""
    from src.bookshelf.entities.book.table import BookTable  # noqa: F401

    async with engine.begin() as connection:
        await connection.run_sync(SQLModel.metadata.create_all)
    logger.info("Database initialized with tables.")

