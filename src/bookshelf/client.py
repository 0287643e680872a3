"""HTTP client for the book gateway."""

from typing import Any

import httpx

from src.bookshelf.core.errors import ServiceError, unknown
from src.bookshelf.core.models import (
    CreateRequest,
    CreateResponse,
    DeleteResponse,
    ReadAllResponse,
    ReadResponse,
    UpdateRequest,
    UpdateResponse,
)
from src.bookshelf.core.services.version_guard import API_VERSION
from src.bookshelf.entities.book.entity import Book


class BookClient:
    """Calls the five book operations and raises ``ServiceError`` on failure.

    Works with any ``httpx.Client``, including FastAPI's ``TestClient``.
    """

    def __init__(self, http: httpx.Client, api_version: str = API_VERSION) -> None:
        self._http = http
        self.api_version = api_version

    @classmethod
    def connect(cls, base_url: str, timeout: float = 3.0) -> "BookClient":
        return cls(httpx.Client(base_url=base_url, timeout=timeout))

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "BookClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _call(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise unknown(f"{method} {path} failed: {exc}") from exc

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and "error" in body:
                raise ServiceError.from_response(body)
            raise unknown(f"{method} {path} returned HTTP {response.status_code}: {response.text}")

        return response.json()

    def create(self, book: Book) -> CreateResponse:
        request = CreateRequest(api=self.api_version, book=book)
        data = self._call("POST", "/v1/books", json=request.model_dump())
        return CreateResponse.model_validate(data)

    def read(self, book_id: int) -> ReadResponse:
        data = self._call("GET", f"/v1/books/{book_id}", params={"api": self.api_version})
        return ReadResponse.model_validate(data)

    def update(self, book: Book) -> UpdateResponse:
        request = UpdateRequest(api=self.api_version, book=book)
        data = self._call("PUT", f"/v1/books/{book.id}", json=request.model_dump())
        return UpdateResponse.model_validate(data)

    def delete(self, book_id: int) -> DeleteResponse:
        data = self._call("DELETE", f"/v1/books/{book_id}", params={"api": self.api_version})
        return DeleteResponse.model_validate(data)

    def read_all(self) -> ReadAllResponse:
        data = self._call("GET", "/v1/books", params={"api": self.api_version})
        return ReadAllResponse.model_validate(data)
