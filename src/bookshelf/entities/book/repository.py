"""Store-backed implementation of the book service."""

import asyncio
import functools
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import CursorResult, Row
from sqlalchemy.ext.asyncio import AsyncEngine

from src.bookshelf.core.errors import (
    ErrorKind,
    ServiceError,
    invalid_argument,
    map_exception,
    not_found,
    store_errors,
    unknown,
)
from src.bookshelf.core.models.book_messages import (
    CreateRequest,
    CreateResponse,
    DeleteRequest,
    DeleteResponse,
    ReadAllRequest,
    ReadAllResponse,
    ReadRequest,
    ReadResponse,
    UpdateRequest,
    UpdateResponse,
)
from src.bookshelf.core.services.database.db_session import connection_scope
from src.bookshelf.core.services.timestamp_codec import decode_timestamp, encode_timestamp
from src.bookshelf.core.services.version_guard import API_VERSION, check_api
from src.bookshelf.entities.book.entity import ID_MAX, ID_MIN, Book
from src.bookshelf.entities.book.table import book_table

ResponseT = TypeVar("ResponseT")


def _log_failure(error: ServiceError) -> None:
    # The operation name is already bound into the record.
    if error.kind is ErrorKind.UNKNOWN:
        logger.error("{}", error.message)
    else:
        logger.warning("rejected ({}): {}", error.kind.value, error.message)


def book_operation(operation: str):
    """Run a repository operation under the caller's deadline.

    Whatever escapes the operation is classified through ``map_exception``
    so callers only ever see ``ServiceError``. Cancellation is propagated
    untouched.
    """

    def decorator(
        func: Callable[[Any, Any], Awaitable[ResponseT]],
    ) -> Callable[..., Awaitable[ResponseT]]:
        @functools.wraps(func)
        async def wrapper(self, request, *, timeout: float | None = None) -> ResponseT:
            with logger.contextualize(operation=operation):
                try:
                    async with asyncio.timeout(timeout):
                        return await func(self, request)
                except Exception as exc:
                    error = map_exception(exc, operation, timeout)
                    _log_failure(error)
                    if error is exc:
                        raise
                    raise error from exc

        return wrapper

    return decorator


def _check_id(book_id: int) -> None:
    if not ID_MIN <= book_id <= ID_MAX:
        raise invalid_argument(f"ID='{book_id}' is outside the 64-bit range", "id")


def _rows_affected(result: CursorResult, message: str) -> int:
    with store_errors(message):
        count = result.rowcount
    if count is None or count < 0:
        raise unknown(f"{message}: driver did not report a row count")
    return count


def _row_to_book(row: Row) -> Book:
    return Book(
        id=row.id,
        title=row.title,
        author=row.author,
        publisher=row.publisher,
        publish_date=encode_timestamp(row.publish_date, "publish_date"),
        rating=row.rating,
        status=row.status,
    )


def _mutable_values(book: Book) -> dict[str, Any]:
    return {
        "title": book.title,
        "author": book.author,
        "publisher": book.publisher,
        "publish_date": decode_timestamp(book.publish_date, "publish_date"),
        "rating": book.rating,
        "status": book.status,
    }


class BookRepository:
    """Book service over a relational store.

    The engine (and its connection pool) is created once per process and
    handed in; the repository keeps no other state, so a single instance
    serves concurrent calls. Each call checks out one pooled connection and
    every write is committed on its own.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    @book_operation("create")
    async def create(self, request: CreateRequest) -> CreateResponse:
        check_api(request.api)
        values = _mutable_values(request.book)

        async with connection_scope(self._engine) as connection:
            with store_errors("failed to insert"):
                result = await connection.execute(insert(book_table).values(**values))
                await connection.commit()

            with store_errors("failed to retrieve id"):
                primary_key = result.inserted_primary_key
            if not primary_key or primary_key[0] is None:
                raise unknown("failed to retrieve id: store returned no primary key")

        book_id = int(primary_key[0])
        logger.debug("Created book {}", book_id)
        return CreateResponse(api=API_VERSION, id=book_id)

    @book_operation("read")
    async def read(self, request: ReadRequest) -> ReadResponse:
        check_api(request.api)
        _check_id(request.id)

        async with connection_scope(self._engine) as connection:
            with store_errors("couldn't select"):
                result = await connection.execute(
                    select(book_table).where(book_table.c.id == request.id)
                )
                # Two rows are enough to tell a unique match from a duplicate.
                rows = result.fetchmany(2)

        if not rows:
            raise not_found(f"cannot find ID='{request.id}'")
        if len(rows) > 1:
            raise unknown(f"multiple rows with ID='{request.id}'")

        return ReadResponse(api=API_VERSION, book=_row_to_book(rows[0]))

    @book_operation("update")
    async def update(self, request: UpdateRequest) -> UpdateResponse:
        check_api(request.api)
        book_id = request.book.id
        _check_id(book_id)
        values = _mutable_values(request.book)

        async with connection_scope(self._engine) as connection:
            with store_errors("failed to update"):
                result = await connection.execute(
                    update(book_table).where(book_table.c.id == book_id).values(**values)
                )
                await connection.commit()
            updated = _rows_affected(result, "retrieve rows affected value error")

        if updated == 0:
            raise not_found(f"ID='{book_id}' not found")

        logger.debug("Updated book {} ({} row(s))", book_id, updated)
        return UpdateResponse(api=API_VERSION, updated=updated)

    @book_operation("delete")
    async def delete(self, request: DeleteRequest) -> DeleteResponse:
        check_api(request.api)
        _check_id(request.id)

        async with connection_scope(self._engine) as connection:
            with store_errors("failed to delete"):
                result = await connection.execute(
                    delete(book_table).where(book_table.c.id == request.id)
                )
                await connection.commit()
            deleted = _rows_affected(result, "failed to retrieve rows affected value")

        if deleted == 0:
            raise not_found(f"ID='{request.id}' is not found")

        logger.debug("Deleted book {} ({} row(s))", request.id, deleted)
        return DeleteResponse(api=API_VERSION, deleted=deleted)

    @book_operation("read_all")
    async def read_all(self, request: ReadAllRequest) -> ReadAllResponse:
        check_api(request.api)

        async with connection_scope(self._engine) as connection:
            with store_errors("failed to select"):
                result = await connection.execute(
                    select(book_table).order_by(book_table.c.id)
                )
                rows = result.all()

        return ReadAllResponse(api=API_VERSION, books=[_row_to_book(row) for row in rows])
