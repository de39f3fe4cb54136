"""Client and controller driven against the real FastAPI app over ASGI."""

from collections.abc import Callable

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from src.book_catalog.api.http.app import app
from src.book_catalog.client import ApiError, BookApiClient, CatalogController
from src.book_catalog.core.services import JwtGeneratorService


def _asgi_client(**kwargs) -> BookApiClient:
    return BookApiClient(
        "http://testserver/api",
        transport=httpx.ASGITransport(app=app),
        **kwargs,
    )


@pytest_asyncio.fixture
async def api(api_client_factory: Callable[..., TestClient]):
    api_client_factory()
    async with _asgi_client() as client:
        yield client


class TestCatalogAgainstApp:
    @pytest.mark.asyncio
    async def test_add_list_and_delete_a_book(self, api: BookApiClient):
        controller = CatalogController(api)
        controller.update_draft("title", "Dune")
        controller.update_draft("author", "Frank Herbert")

        state = await controller.submit()
        assert state.error_message == ""
        assert [b.title for b in state.books] == ["Dune"]
        created = state.books[0]
        assert created.id

        state = await controller.load_books()
        assert state.books == (created,)
        assert state.draft.title == ""

        state = await controller.delete(created.id)
        assert state.books == ()
        assert state.pending is False

        state = await controller.load_books()
        assert state.books == ()
        assert state.error_message == ""

    @pytest.mark.asyncio
    async def test_blank_title_is_rejected_by_the_server(self, api: BookApiClient):
        with pytest.raises(ApiError) as exc_info:
            await api.create_book("", "X")

        assert exc_info.value.status_code == 400
        assert "title" in exc_info.value.message
        assert await api.list_books() == []

    @pytest.mark.asyncio
    async def test_deleting_unknown_book_surfaces_server_message(
        self, api: BookApiClient
    ):
        controller = CatalogController(api)

        state = await controller.delete("does-not-exist")

        assert state.pending is False
        assert state.error_message == "Book not found"


class TestAuthAgainstApp:
    @pytest.mark.asyncio
    async def test_required_auth_accepts_stored_token(
        self,
        api_client_factory: Callable[..., TestClient],
        jwt_generate_service: JwtGeneratorService,
    ):
        api_client_factory(required=True)
        token = jwt_generate_service.generate_access_token("reader@example.com")

        async with _asgi_client(credentials=lambda: token) as api:
            created = await api.create_book("Dune", "Frank Herbert")
            assert await api.list_books() == [created]

    @pytest.mark.asyncio
    async def test_required_auth_rejects_missing_token(
        self, api_client_factory: Callable[..., TestClient]
    ):
        api_client_factory(required=True)

        async with _asgi_client() as api:
            with pytest.raises(ApiError) as exc_info:
                await api.list_books()

        assert exc_info.value.status_code == 401
