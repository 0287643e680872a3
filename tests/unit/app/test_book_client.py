"""Tests for the HTTP book client and the demo sequence built on it."""

import httpx
import pytest

from src.bookshelf.cli import run_demo
from src.bookshelf.client import BookClient
from src.bookshelf.core.errors import ErrorKind, ServiceError


class TestBookClient:
    def test_create_and_read(self, api_client, make_book):
        client = BookClient(api_client)

        created = client.create(make_book())
        read = client.read(created.id)

        assert created.api == "v1"
        assert read.book == make_book(id=created.id)

    def test_update_delete_and_list(self, api_client, make_book):
        client = BookClient(api_client)
        book_id = client.create(make_book()).id

        assert client.update(make_book(id=book_id, rating=4.5)).updated == 1
        assert client.read_all().books[0].rating == 4.5
        assert client.delete(book_id).deleted == 1
        assert client.read_all().books == []

    def test_gateway_errors_are_rebuilt(self, api_client):
        client = BookClient(api_client)

        with pytest.raises(ServiceError) as exc_info:
            client.read(17)

        assert exc_info.value.kind is ErrorKind.NOT_FOUND
        assert exc_info.value.message == "cannot find ID='17'"

    def test_client_version_is_sent(self, api_client):
        client = BookClient(api_client, api_version="v2")

        with pytest.raises(ServiceError) as exc_info:
            client.read_all()

        assert exc_info.value.kind is ErrorKind.UNIMPLEMENTED

    def test_non_service_error_response(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="bad gateway")

        client = BookClient(httpx.Client(transport=httpx.MockTransport(handler), base_url="http://books"))

        with pytest.raises(ServiceError) as exc_info:
            client.read_all()

        assert exc_info.value.kind is ErrorKind.UNKNOWN
        assert "HTTP 502" in exc_info.value.message

    def test_transport_failure_is_unknown(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = BookClient(httpx.Client(transport=httpx.MockTransport(handler), base_url="http://books"))

        with pytest.raises(ServiceError) as exc_info:
            client.delete(1)

        assert exc_info.value.kind is ErrorKind.UNKNOWN
        assert "connection refused" in exc_info.value.message


class TestDemo:
    def test_demo_runs_every_operation(self, live_client):
        run_demo(BookClient(live_client))

        assert live_client.get("/v1/books").json()["books"] == []

    def test_demo_makes_one_call_per_operation(self, api_client, book_service):
        run_demo(BookClient(api_client))

        assert len(book_service.timeouts) == 5
