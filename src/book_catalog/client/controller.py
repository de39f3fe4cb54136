"""State transitions behind the catalog's form-and-list view."""

from collections.abc import Callable
from dataclasses import replace

from loguru import logger

from src.book_catalog.client.api import ApiError, BookApiClient
from src.book_catalog.client.state import CatalogState, Draft

MISSING_FIELDS_MESSAGE = "Title and Author are required fields"
LOAD_FAILED_MESSAGE = "Failed to load books"
ADD_FAILED_MESSAGE = "Failed to add book"
DELETE_FAILED_MESSAGE = "Failed to delete book"

StateListener = Callable[[CatalogState], None]


class CatalogController:
    """Apply user actions to a CatalogState.

    Each action replaces ``state`` with a new value built from the previous one;
    listeners are told about every replacement. The controller does not queue or
    reject overlapping actions. Callers are expected to block input while
    ``state.pending`` is set.
    """

    def __init__(self, api: BookApiClient, state: CatalogState | None = None):
        self._api = api
        self._state = state or CatalogState()
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> CatalogState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _transition(self, **changes) -> CatalogState:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    def _fail(self, exc: ApiError, fallback: str) -> CatalogState:
        return self._transition(pending=False, error_message=exc.message or fallback)

    async def load_books(self) -> CatalogState:
        self._transition(pending=True)
        try:
            books = await self._api.list_books()
        except ApiError as exc:
            return self._fail(exc, LOAD_FAILED_MESSAGE)
        return self._transition(books=tuple(books), pending=False, error_message="")

    def update_draft(self, name: str, value: str) -> CatalogState:
        return self._transition(draft=self._state.draft.with_field(name, value))

    async def submit(self) -> CatalogState:
        draft = self._state.draft
        if not draft.is_complete():
            logger.debug("Rejected incomplete draft")
            return self._transition(error_message=MISSING_FIELDS_MESSAGE)

        self._transition(pending=True)
        try:
            created = await self._api.create_book(
                title=draft.title,
                author=draft.author,
                description=draft.description,
            )
        except ApiError as exc:
            return self._fail(exc, ADD_FAILED_MESSAGE)
        return self._transition(
            books=(*self._state.books, created),
            draft=Draft(),
            pending=False,
            error_message="",
        )

    async def delete(self, book_id: str) -> CatalogState:
        self._transition(pending=True)
        try:
            await self._api.delete_book(book_id)
        except ApiError as exc:
            return self._fail(exc, DELETE_FAILED_MESSAGE)
        return self._transition(
            books=tuple(book for book in self._state.books if book.id != book_id),
            pending=False,
            error_message="",
        )
