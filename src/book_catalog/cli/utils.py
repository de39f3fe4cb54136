"""Shared helpers for the CLI commands."""

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from src.book_catalog.client import BookApiClient, TokenStore
from src.book_catalog.entities.book import Book
from src.book_catalog.runtime.context import get_config

console = Console()


def get_token_store() -> TokenStore:
    """Token store at the configured ``client.token_file`` path."""
    return TokenStore(get_config().client.token_file)


def build_api_client(api_url: str | None = None) -> BookApiClient:
    """HTTP client for the configured API, authenticated from the token store."""
    store = get_token_store()
    return BookApiClient(
        api_url or get_config().client.api_base_url, credentials=store.get_token
    )


def render_books(books: tuple[Book, ...] | list[Book], numbered: bool = False) -> None:
    if not books:
        console.print("[yellow]No books added yet. Add your first book above![/yellow]")
        return

    table = Table(title=f"Your Books ({len(books)})")
    if numbered:
        table.add_column("#", style="dim", justify="right")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title", style="green")
    table.add_column("Author", style="magenta")
    table.add_column("Description", style="white")

    for index, book in enumerate(books, start=1):
        # Book text is shown literally, never parsed as markup
        row = [Text(v) for v in (book.id, book.title, book.author, book.description or "")]
        if numbered:
            row.insert(0, Text(str(index)))
        table.add_row(*row)

    console.print(table)


def print_error(message: str) -> None:
    console.print(f"[red]❌ {escape(message)}[/red]")
