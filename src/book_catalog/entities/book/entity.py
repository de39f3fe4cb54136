"""Entity: Book."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.book_catalog.entities.core._base import Entity


class BookCreate(BaseModel):
    """Payload accepted when adding a book.

    ``title`` and ``author`` are trimmed and must not be blank; ``description``
    is stored as given.
    """

    model_config = ConfigDict(str_max_length=10_000)

    title: str = Field(description="Title")
    author: str = Field(description="Author")
    description: str | None = Field(default=None, description="Optional description")

    @field_validator("title", "author")
    @classmethod
    def _require_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class Book(Entity):
    """Book entity as stored and returned by the API.

    The identifier is assigned by the store when the book is inserted and never
    changes afterwards.
    """

    title: str = Field(description="Title")
    author: str = Field(description="Author")
    description: str | None = Field(default=None, description="Optional description")

    def __eq__(self, other: Any) -> bool:
        """Compare books by business attributes, ignoring timestamps."""
        if not isinstance(other, Book):
            return False

        return (
            self.id == other.id
            and self.title == other.title
            and self.author == other.author
            and self.description == other.description
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((self.id, self.title, self.author, self.description))
