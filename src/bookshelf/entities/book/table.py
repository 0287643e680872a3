"""Book database table model."""

from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


class BookTable(SQLModel, table=True):
    """Database persistence model for books.

    This represents how the Book entity is stored in the database. The id
    comes from the store's sequence and is never supplied on insert.
    """

    __tablename__ = "book"

    id: int | None = Field(
        default=None,
        sa_column=sa.Column(
            sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
            primary_key=True,
            autoincrement=True,
        ),
    )
    title: str
    author: str
    publisher: str
    publish_date: datetime = Field(sa_column=sa.Column(sa.DateTime(timezone=True), nullable=False))
    rating: float
    status: int = Field(sa_column=sa.Column(sa.SmallInteger(), nullable=False))


book_table: sa.Table = BookTable.__table__  # type: ignore[assignment]
