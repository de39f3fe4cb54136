"""Tests for the catalog controller's state transitions."""

import httpx
import pytest
import pytest_asyncio

from src.book_catalog.client import (
    BookApiClient,
    CatalogController,
    CatalogState,
    Draft,
    TokenStore,
)
from src.book_catalog.client.controller import (
    ADD_FAILED_MESSAGE,
    DELETE_FAILED_MESSAGE,
    LOAD_FAILED_MESSAGE,
    MISSING_FIELDS_MESSAGE,
)

from tests.fixtures.fake_server import FakeBooksServer


@pytest.fixture
def server() -> FakeBooksServer:
    return FakeBooksServer()


@pytest_asyncio.fixture
async def controller(server):
    async with BookApiClient("http://books.test/api", transport=server.transport) as api:
        yield CatalogController(api)


async def add(controller: CatalogController, title: str, author: str, description=""):
    controller.update_draft("title", title)
    controller.update_draft("author", author)
    controller.update_draft("description", description)
    return await controller.submit()


class TestDraft:
    def test_update_is_local(self, server):
        controller = CatalogController(
            BookApiClient("http://books.test/api", transport=server.transport)
        )

        state = controller.update_draft("title", "Dune")

        assert state.draft == Draft(title="Dune")
        assert server.requests == []

    def test_unknown_field_raises(self):
        controller = CatalogController(BookApiClient("http://unused"))
        with pytest.raises(ValueError):
            controller.update_draft("isbn", "123")

    def test_states_are_new_objects(self):
        controller = CatalogController(BookApiClient("http://unused"))
        before = controller.state

        after = controller.update_draft("author", "Herbert")

        assert before is not after
        assert before.draft.author == ""


class TestSubmit:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("title,author", [("", "X"), ("Dune", "  "), ("", "")])
    async def test_incomplete_draft_sends_nothing(self, controller, server, title, author):
        state = await add(controller, title, author)

        assert state.error_message == MISSING_FIELDS_MESSAGE
        assert server.requests == []
        assert state.draft.author == author

    @pytest.mark.asyncio
    async def test_success_appends_and_resets_draft(self, controller):
        state = await add(controller, "Dune", "Frank Herbert", "Sci-fi classic")

        assert len(state.books) == 1
        assert state.books[0].id
        assert state.books[0].title == "Dune"
        assert state.draft == Draft()
        assert state.error_message == ""
        assert state.pending is False

    @pytest.mark.asyncio
    async def test_failure_keeps_draft_and_uses_server_message(self, controller, server):
        server.fail_with = httpx.Response(400, json={"message": "title: too long"})

        state = await add(controller, "Dune", "Frank Herbert")

        assert state.error_message == "title: too long"
        assert state.draft.title == "Dune"
        assert state.books == ()

    @pytest.mark.asyncio
    async def test_failure_without_message_uses_fallback(self, controller, server):
        server.fail_with = httpx.Response(500, text="oops")

        state = await add(controller, "Dune", "Frank Herbert")

        assert state.error_message == ADD_FAILED_MESSAGE

    @pytest.mark.asyncio
    async def test_success_clears_previous_error(self, controller):
        await add(controller, "", "")
        state = await add(controller, "Dune", "Frank Herbert")
        assert state.error_message == ""


class TestLoad:
    @pytest.mark.asyncio
    async def test_replaces_books_in_server_order(self, controller, server):
        server.books = [
            {"id": "b", "title": "Second", "author": "A"},
            {"id": "a", "title": "First", "author": "A"},
        ]

        state = await controller.load_books()

        assert [b.id for b in state.books] == ["b", "a"]

    @pytest.mark.asyncio
    async def test_failure_uses_fallback(self, controller, server):
        server.fail_with = httpx.Response(503)

        state = await controller.load_books()

        assert state.error_message == LOAD_FAILED_MESSAGE
        assert state.pending is False

    @pytest.mark.asyncio
    async def test_pending_is_set_while_request_in_flight(self, controller):
        seen: list[CatalogState] = []
        controller.subscribe(seen.append)

        await controller.load_books()

        assert [s.pending for s in seen] == [True, False]

    @pytest.mark.asyncio
    async def test_unsubscribe(self, controller):
        seen: list[CatalogState] = []
        unsubscribe = controller.subscribe(seen.append)
        unsubscribe()

        await controller.load_books()

        assert seen == []


class TestCredentialFailures:
    @pytest.mark.asyncio
    async def test_unreadable_token_file_does_not_leave_request_pending(
        self, server, tmp_path
    ):
        store = TokenStore(tmp_path)
        async with BookApiClient(
            "http://books.test/api", store.get_token, transport=server.transport
        ) as api:
            state = await CatalogController(api).load_books()

        assert state.pending is False
        assert state.error_message == ""
        assert "Authorization" not in server.requests[0].headers

    @pytest.mark.asyncio
    async def test_failing_credential_accessor_sets_error(self, server):
        def broken() -> str | None:
            raise PermissionError("denied")

        async with BookApiClient(
            "http://books.test/api", broken, transport=server.transport
        ) as api:
            state = await CatalogController(api).load_books()

        assert state.pending is False
        assert state.error_message == "Could not read stored credentials"
        assert server.requests == []


class TestDelete:
    @pytest.mark.asyncio
    async def test_success_removes_book(self, controller):
        await add(controller, "Dune", "Frank Herbert")
        state = await add(controller, "Emma", "Jane Austen")
        dune = state.books[0]

        state = await controller.delete(dune.id)

        assert [b.title for b in state.books] == ["Emma"]

    @pytest.mark.asyncio
    async def test_failure_leaves_books_unchanged(self, controller, server):
        state = await add(controller, "Dune", "Frank Herbert")
        server.fail_with = httpx.Response(500)

        after = await controller.delete(state.books[0].id)

        assert after.books == state.books
        assert after.error_message == DELETE_FAILED_MESSAGE

    @pytest.mark.asyncio
    async def test_unknown_id_reports_server_message(self, controller):
        state = await controller.delete("missing")
        assert state.error_message == "Book not found"

    @pytest.mark.asyncio
    async def test_scenario_add_list_delete(self, controller):
        await add(controller, "Dune", "Frank Herbert", "Sci-fi classic")
        state = await controller.load_books()
        assert [b.title for b in state.books] == ["Dune"]

        await controller.delete(state.books[0].id)
        state = await controller.load_books()
        assert state.books == ()
