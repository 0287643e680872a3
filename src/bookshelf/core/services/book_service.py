"""The five-operation book service contract."""

from typing import Protocol, runtime_checkable

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


@runtime_checkable
class BookService(Protocol):
    """Capability set served over the wire.

    Implementations raise ``ServiceError`` for every failure. ``timeout`` is
    the caller's deadline in seconds; ``None`` means no deadline.
    """

    async def create(
        self, request: CreateRequest, *, timeout: float | None = None
    ) -> CreateResponse: ...

    async def read(
        self, request: ReadRequest, *, timeout: float | None = None
    ) -> ReadResponse: ...

    async def update(
        self, request: UpdateRequest, *, timeout: float | None = None
    ) -> UpdateResponse: ...

    async def delete(
        self, request: DeleteRequest, *, timeout: float | None = None
    ) -> DeleteResponse: ...

    async def read_all(
        self, request: ReadAllRequest, *, timeout: float | None = None
    ) -> ReadAllResponse: ...
