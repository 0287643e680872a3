"""Book API router: the five service operations over HTTP/JSON."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from src.bookshelf.api.http.deps import get_book_service, get_call_timeout
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
from src.bookshelf.core.services import BookService
from src.bookshelf.entities.book.entity import ID_MAX, ID_MIN

BookId = Annotated[int, Path(ge=ID_MIN, le=ID_MAX)]

router = APIRouter(prefix="/v1/books", tags=["books"])


@router.post("", response_model=CreateResponse)
async def create_book(
    request: CreateRequest,
    service: BookService = Depends(get_book_service),
    timeout: float | None = Depends(get_call_timeout),
) -> CreateResponse:
    """Create a new book."""
    return await service.create(request, timeout=timeout)


@router.get("/{book_id}", response_model=ReadResponse)
async def read_book(
    book_id: BookId,
    api: str = "",
    service: BookService = Depends(get_book_service),
    timeout: float | None = Depends(get_call_timeout),
) -> ReadResponse:
    """Get a book by ID."""
    return await service.read(ReadRequest(api=api, id=book_id), timeout=timeout)


@router.put("/{book_id}", response_model=UpdateResponse)
async def update_book(
    book_id: BookId,
    request: UpdateRequest,
    service: BookService = Depends(get_book_service),
    timeout: float | None = Depends(get_call_timeout),
) -> UpdateResponse:
    """Replace every mutable field of a book."""
    # The path identifies the target
    request.book.id = book_id
    return await service.update(request, timeout=timeout)


@router.delete("/{book_id}", response_model=DeleteResponse)
async def delete_book(
    book_id: BookId,
    api: str = "",
    service: BookService = Depends(get_book_service),
    timeout: float | None = Depends(get_call_timeout),
) -> DeleteResponse:
    """Delete a book."""
    return await service.delete(DeleteRequest(api=api, id=book_id), timeout=timeout)


@router.get("", response_model=ReadAllResponse)
async def list_books(
    api: str = "",
    service: BookService = Depends(get_book_service),
    timeout: float | None = Depends(get_call_timeout),
) -> ReadAllResponse:
    """List all books."""
    return await service.read_all(ReadAllRequest(api=api), timeout=timeout)
