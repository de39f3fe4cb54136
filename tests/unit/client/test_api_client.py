"""Tests for the async books API client."""

import httpx
import pytest

from src.book_catalog.client import ApiError, BookApiClient

from tests.fixtures.fake_server import FakeBooksServer

BASE_URL = "http://books.test/api"


@pytest.fixture
def server() -> FakeBooksServer:
    return FakeBooksServer()


def make_client(server, credentials=lambda: None) -> BookApiClient:
    return BookApiClient(BASE_URL, credentials, transport=server.transport)


class TestRequests:
    @pytest.mark.asyncio
    async def test_create_then_list(self, server):
        async with make_client(server) as api:
            created = await api.create_book("Dune", "Frank Herbert", "Sci-fi classic")
            listed = await api.list_books()

        assert created.id
        assert listed == [created]
        assert server.requests[0].url == httpx.URL(f"{BASE_URL}/books")

    @pytest.mark.asyncio
    async def test_delete_quotes_identifier(self, server):
        server.fail_with = httpx.Response(404, json={"message": "Book not found"})

        async with make_client(server) as api:
            with pytest.raises(ApiError):
                await api.delete_book("a/b")

        assert server.requests[0].url.raw_path == b"/api/books/a%2Fb"


class TestCredentials:
    @pytest.mark.asyncio
    async def test_bearer_header_from_accessor(self, server):
        async with make_client(server, lambda: "tok-123") as api:
            await api.list_books()

        assert server.requests[0].headers["Authorization"] == "Bearer tok-123"

    @pytest.mark.asyncio
    async def test_no_header_without_token(self, server):
        async with make_client(server) as api:
            await api.list_books()

        assert "Authorization" not in server.requests[0].headers

    @pytest.mark.asyncio
    async def test_accessor_called_per_request(self, server):
        tokens = iter(["first", "second"])

        async with make_client(server, lambda: next(tokens)) as api:
            await api.list_books()
            await api.list_books()

        assert [r.headers["Authorization"] for r in server.requests] == [
            "Bearer first",
            "Bearer second",
        ]


class TestErrors:
    @pytest.mark.asyncio
    async def test_server_message_is_surfaced(self, server):
        server.fail_with = httpx.Response(
            400, json={"message": "title: must not be blank", "request_id": "r1"}
        )

        async with make_client(server) as api:
            with pytest.raises(ApiError) as exc_info:
                await api.create_book("", "X")

        assert exc_info.value.message == "title: must not be blank"
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(500, text="<html>oops</html>"),
            httpx.Response(500, json={"detail": "no message key"}),
            httpx.Response(500, json=["not", "an", "object"]),
            httpx.Response(500, json={"message": "   "}),
        ],
    )
    async def test_unusable_error_body_has_no_message(self, server, response):
        server.fail_with = response

        async with make_client(server) as api:
            with pytest.raises(ApiError) as exc_info:
                await api.list_books()

        assert exc_info.value.message is None
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        api = BookApiClient(BASE_URL, transport=httpx.MockTransport(refuse))
        async with api:
            with pytest.raises(ApiError) as exc_info:
                await api.list_books()

        assert exc_info.value.message is None
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_malformed_success_body(self, server):
        server.fail_with = httpx.Response(200, json=[{"unexpected": True}])

        async with make_client(server) as api:
            with pytest.raises(ApiError) as exc_info:
                await api.list_books()

        assert exc_info.value.message == "Unexpected response from server"
