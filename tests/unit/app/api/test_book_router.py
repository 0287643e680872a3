"""Tests for the /v1/books gateway routes and their error mapping."""

from fastapi.testclient import TestClient

from src.bookshelf.api.http.app import create_app
from src.bookshelf.api.http.deps import get_book_service

BOOK = {
    "title": "title",
    "author": "author",
    "publisher": "publisher",
    "publish_date": {"seconds": 1033552800, "nanos": 123456000},
    "rating": 2.0,
    "status": 1,
}


def _create(client: TestClient, **overrides) -> int:
    response = client.post("/v1/books", json={"api": "v1", "book": {**BOOK, **overrides}})
    assert response.status_code == 200
    return response.json()["id"]


class TestBookRoutes:
    def test_create_returns_the_assigned_id(self, api_client):
        response = api_client.post("/v1/books", json={"api": "v1", "book": BOOK})

        assert response.status_code == 200
        assert response.json() == {"api": "v1", "id": 1}

    def test_read_returns_the_stored_book(self, api_client):
        book_id = _create(api_client)

        response = api_client.get(f"/v1/books/{book_id}", params={"api": "v1"})

        assert response.status_code == 200
        assert response.json() == {"api": "v1", "book": {**BOOK, "id": book_id}}

    def test_update_targets_the_path_id(self, api_client):
        book_id = _create(api_client)

        response = api_client.put(
            f"/v1/books/{book_id}",
            json={"api": "v1", "book": {**BOOK, "id": 999, "author": "author + updated"}},
        )

        assert response.status_code == 200
        assert response.json() == {"api": "v1", "updated": 1}
        assert api_client.get(f"/v1/books/{book_id}").json()["book"]["author"] == "author + updated"

    def test_delete_then_read_is_404(self, api_client):
        book_id = _create(api_client)

        assert api_client.delete(f"/v1/books/{book_id}").json() == {"api": "v1", "deleted": 1}
        assert api_client.get(f"/v1/books/{book_id}").status_code == 404

    def test_list(self, api_client):
        _create(api_client, title="first")
        _create(api_client, title="second")

        response = api_client.get("/v1/books", params={"api": "v1"})

        assert response.status_code == 200
        assert [book["title"] for book in response.json()["books"]] == ["first", "second"]

    def test_configured_deadline_reaches_the_service(self, api_client, book_service):
        api_client.get("/v1/books")

        assert book_service.timeouts == [2.5]


class TestErrorMapping:
    def test_not_found_is_404(self, api_client):
        response = api_client.get("/v1/books/42")

        assert response.status_code == 404
        assert response.json() == {
            "error": {"kind": "not_found", "message": "cannot find ID='42'", "field": None}
        }

    def test_unsupported_version_is_501(self, api_client):
        response = api_client.get("/v1/books", params={"api": "v2"})

        assert response.status_code == 501
        error = response.json()["error"]
        assert error["kind"] == "unimplemented"
        assert "requested version 'v2'" in error["message"]

    def test_bad_timestamp_is_400(self, api_client):
        response = api_client.post(
            "/v1/books",
            json={"api": "v1", "book": {**BOOK, "publish_date": {"seconds": 0, "nanos": -1}}},
        )

        assert response.status_code == 400
        assert response.json()["error"]["kind"] == "invalid_argument"
        assert response.json()["error"]["field"] == "publish_date"

    def test_malformed_body_is_400(self, api_client):
        response = api_client.post("/v1/books", json={"api": "v1"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["kind"] == "invalid_argument"
        assert error["field"] == "body.book"
        assert error["details"][0]["type"] == "missing"

    def test_non_integer_id_is_400(self, api_client):
        response = api_client.get("/v1/books/abc")

        assert response.status_code == 400
        assert response.json()["error"]["field"] == "path.book_id"

    def test_id_beyond_64_bits_is_400(self, api_client, book_service):
        response = api_client.get("/v1/books/9223372036854775808")

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["kind"] == "invalid_argument"
        assert error["field"] == "path.book_id"
        assert book_service.timeouts == []

    def test_id_below_64_bits_is_400(self, api_client):
        response = api_client.delete("/v1/books/-9223372036854775809")

        assert response.status_code == 400
        assert response.json()["error"]["field"] == "path.book_id"

    def test_status_outside_smallint_is_400(self, api_client):
        response = api_client.post("/v1/books", json={"api": "v1", "book": {**BOOK, "status": 40000}})

        assert response.status_code == 400
        assert response.json()["error"]["field"] == "body.book.status"

    def test_unhandled_exception_is_500_without_details(self, api_config):
        class BrokenService:
            async def read_all(self, request, *, timeout=None):
                raise RuntimeError("secret internals")

        app = create_app(api_config)
        app.dependency_overrides[get_book_service] = lambda: BrokenService()
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/v1/books")

        assert response.status_code == 500
        assert response.json()["error"]["kind"] == "unknown"
        assert "secret" not in response.text

    def test_uninitialized_service_is_503(self, api_config):
        client = TestClient(create_app(api_config))

        assert client.get("/v1/books").status_code == 503


class TestRequestId:
    def test_request_id_is_echoed(self, api_client):
        response = api_client.get("/v1/books", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_id_is_generated(self, api_client):
        response = api_client.get("/v1/books")

        assert response.headers["X-Request-ID"]


class TestFullStack:
    def test_every_operation_against_a_real_store(self, live_client):
        book_id = _create(live_client)
        assert book_id == 1

        read = live_client.get(f"/v1/books/{book_id}", params={"api": "v1"}).json()
        assert read["book"] == {**BOOK, "id": 1}

        updated = live_client.put(
            f"/v1/books/{book_id}",
            json={"api": "v1", "book": {**BOOK, "author": "author + updated"}},
        )
        assert updated.json()["updated"] == 1

        listing = live_client.get("/v1/books").json()
        assert [book["author"] for book in listing["books"]] == ["author + updated"]

        assert live_client.delete(f"/v1/books/{book_id}").json()["deleted"] == 1
        assert live_client.delete(f"/v1/books/{book_id}").status_code == 404

    def test_largest_id_reaches_the_store(self, live_client):
        response = live_client.get("/v1/books/9223372036854775807")

        assert response.status_code == 404
        assert response.json()["error"]["kind"] == "not_found"

    def test_foreign_version_is_rejected_end_to_end(self, live_client):
        response = live_client.delete("/v1/books/1", params={"api": "v1bogus"})

        assert response.status_code == 501
