"""Async HTTP client for the books API."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx
from loguru import logger

from src.book_catalog.client.credentials import CredentialAccessor, no_credentials
from src.book_catalog.entities.book import Book


class ApiError(Exception):
    """A request to the books API failed.

    ``message`` is the server-supplied ``message`` field when the error body
    had one, otherwise None. ``status_code`` is None for transport failures.
    """

    def __init__(self, message: str | None = None, status_code: int | None = None):
        super().__init__(message or f"HTTP {status_code}")
        self.message = message
        self.status_code = status_code


def _error_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return None


class BookApiClient:
    """Issue list/create/delete requests against ``<base_url>/books``.

    The credential accessor is called for every request; when it returns a
    token an ``Authorization: Bearer`` header is attached.
    """

    def __init__(
        self,
        base_url: str,
        credentials: CredentialAccessor = no_credentials,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._credentials = credentials
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/",
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> BookApiClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _auth_headers(self) -> dict[str, str]:
        token = self._credentials()
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            headers = self._auth_headers()
        except OSError as exc:
            logger.warning("Could not read credentials for {} {}: {}", method, url, exc)
            raise ApiError("Could not read stored credentials") from exc

        try:
            response = await self._client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("{} {} failed: {}", method, url, exc)
            raise ApiError(None, None) from exc

        if response.is_error:
            message = _error_message(response)
            logger.warning(
                "{} {} returned {}: {}", method, url, response.status_code, message
            )
            raise ApiError(message, response.status_code)
        return response

    async def list_books(self) -> list[Book]:
        response = await self._request("GET", "books")
        try:
            return [Book.model_validate(item) for item in response.json()]
        except (TypeError, ValueError) as exc:
            raise ApiError("Unexpected response from server", response.status_code) from exc

    async def create_book(
        self, title: str, author: str, description: str | None = None
    ) -> Book:
        payload = {"title": title, "author": author, "description": description}
        response = await self._request("POST", "books", json=payload)
        try:
            return Book.model_validate(response.json())
        except ValueError as exc:
            raise ApiError("Unexpected response from server", response.status_code) from exc

    async def delete_book(self, book_id: str) -> None:
        await self._request("DELETE", f"books/{quote(book_id, safe='')}")
