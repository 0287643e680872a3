from __future__ import annotations

import asyncio
import itertools
from datetime import UTC, datetime
from types import SimpleNamespace
from typing import Any

from src.bookshelf.core.errors import not_found
from src.bookshelf.core.models import (
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
from src.bookshelf.core.services.timestamp_codec import decode_timestamp
from src.bookshelf.core.services.version_guard import API_VERSION, check_api
from src.bookshelf.entities.book.entity import Book


class InMemoryBookService:
    """Dict-backed book service for gateway and client tests."""

    def __init__(self) -> None:
        self._books: dict[int, Book] = {}
        self._ids = itertools.count(1)
        self.timeouts: list[float | None] = []

    async def create(self, request: CreateRequest, *, timeout: float | None = None) -> CreateResponse:
        self.timeouts.append(timeout)
        check_api(request.api)
        decode_timestamp(request.book.publish_date, "publish_date")
        book_id = next(self._ids)
        self._books[book_id] = request.book.model_copy(update={"id": book_id})
        return CreateResponse(api=API_VERSION, id=book_id)

    async def read(self, request: ReadRequest, *, timeout: float | None = None) -> ReadResponse:
        self.timeouts.append(timeout)
        check_api(request.api)
        if request.id not in self._books:
            raise not_found(f"cannot find ID='{request.id}'")
        return ReadResponse(api=API_VERSION, book=self._books[request.id])

    async def update(self, request: UpdateRequest, *, timeout: float | None = None) -> UpdateResponse:
        self.timeouts.append(timeout)
        check_api(request.api)
        decode_timestamp(request.book.publish_date, "publish_date")
        if request.book.id not in self._books:
            raise not_found(f"ID='{request.book.id}' not found")
        self._books[request.book.id] = request.book.model_copy()
        return UpdateResponse(api=API_VERSION, updated=1)

    async def delete(self, request: DeleteRequest, *, timeout: float | None = None) -> DeleteResponse:
        self.timeouts.append(timeout)
        check_api(request.api)
        if self._books.pop(request.id, None) is None:
            raise not_found(f"ID='{request.id}' is not found")
        return DeleteResponse(api=API_VERSION, deleted=1)

    async def read_all(self, request: ReadAllRequest, *, timeout: float | None = None) -> ReadAllResponse:
        self.timeouts.append(timeout)
        check_api(request.api)
        return ReadAllResponse(api=API_VERSION, books=list(self._books.values()))


class ScriptedResult:
    """Stands in for a SQLAlchemy CursorResult."""

    def __init__(
        self,
        rows: list[Any] | None = None,
        rowcount: int = 1,
        inserted_primary_key: tuple | None = (1,),
    ) -> None:
        self._rows = list(rows or [])
        self.rowcount = rowcount
        self.inserted_primary_key = inserted_primary_key

    def fetchmany(self, size: int) -> list[Any]:
        return self._rows[:size]

    def all(self) -> list[Any]:
        return list(self._rows)


class ScriptedConnection:
    def __init__(self, engine: ScriptedEngine) -> None:
        self._engine = engine
        self.started = False
        self.closed = False
        self.committed = False

    async def start(self) -> ScriptedConnection:
        if self._engine.start_error is not None:
            raise self._engine.start_error
        self.started = True
        return self

    async def execute(self, statement: Any) -> ScriptedResult:
        self._engine.statements.append(statement)
        if self._engine.stall:
            await asyncio.sleep(3600)
        if self._engine.execute_error is not None:
            raise self._engine.execute_error
        return self._engine.result

    async def commit(self) -> None:
        self.committed = True

    async def close(self) -> None:
        self.closed = True


class ScriptedEngine:
    """Engine double whose connections replay a scripted outcome.

    Records every checked-out connection so tests can assert that each one
    was closed.
    """

    def __init__(
        self,
        result: ScriptedResult | None = None,
        start_error: BaseException | None = None,
        execute_error: BaseException | None = None,
        stall: bool = False,
    ) -> None:
        self.result = result or ScriptedResult()
        self.start_error = start_error
        self.execute_error = execute_error
        self.stall = stall
        self.connections: list[ScriptedConnection] = []
        self.statements: list[Any] = []

    def connect(self) -> ScriptedConnection:
        connection = ScriptedConnection(self)
        self.connections.append(connection)
        return connection

    @property
    def open_connections(self) -> int:
        return sum(1 for c in self.connections if c.started and not c.closed)


def book_row(book_id: int = 1, publish_date: Any = None, **overrides: Any) -> SimpleNamespace:
    """A row shaped like ``SELECT * FROM book``."""
    values = {
        "id": book_id,
        "title": "title",
        "author": "author",
        "publisher": "publisher",
        "publish_date": publish_date or datetime(2002, 10, 2, 10, 0, tzinfo=UTC),
        "rating": 2.0,
        "status": 1,
    }
    values.update(overrides)
    return SimpleNamespace(**values)
