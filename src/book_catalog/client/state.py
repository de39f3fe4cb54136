"""Immutable UI state for the catalog client."""

from dataclasses import dataclass, field, fields, replace

from src.book_catalog.entities.book import Book


@dataclass(frozen=True)
class Draft:
    """Form fields for a book that has not been saved yet."""

    title: str = ""
    author: str = ""
    description: str = ""

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def with_field(self, name: str, value: str) -> "Draft":
        if name not in self.field_names():
            raise ValueError(f"Unknown draft field: {name}")
        return replace(self, **{name: value})

    def is_complete(self) -> bool:
        return bool(self.title.strip()) and bool(self.author.strip())


@dataclass(frozen=True)
class CatalogState:
    """Everything the form-and-list view renders."""

    books: tuple[Book, ...] = ()
    draft: Draft = field(default_factory=Draft)
    pending: bool = False
    error_message: str = ""
