"""Terminal front end for the book catalog."""

import asyncio

import typer
from rich.markup import escape
from rich.prompt import Prompt

from src.book_catalog.client import CatalogController, CatalogState

from .utils import build_api_client, console, print_error, render_books

books_app = typer.Typer(help="📚 List, add and delete books")

API_URL_OPTION = typer.Option(
    None, "--api-url", help="Base URL of the books API (defaults to client.api_base_url)"
)


def _show_pending(state: CatalogState) -> None:
    if state.pending:
        console.print("[dim]⏳ Working...[/dim]")


def _exit_on_error(state: CatalogState) -> None:
    if state.error_message:
        print_error(state.error_message)
        raise typer.Exit(code=1)


@books_app.command("list")
def list_books(api_url: str | None = API_URL_OPTION) -> None:
    """Show every book in the catalog."""

    async def run() -> CatalogState:
        async with build_api_client(api_url) as api:
            return await CatalogController(api).load_books()

    state = asyncio.run(run())
    _exit_on_error(state)
    render_books(state.books)


@books_app.command("add")
def add_book(
    title: str = typer.Option("", "--title", "-t", help="Book title"),
    author: str = typer.Option("", "--author", "-a", help="Book author"),
    description: str = typer.Option("", "--description", "-d", help="Optional description"),
    api_url: str | None = API_URL_OPTION,
) -> None:
    """Add a book to the catalog."""

    async def run() -> CatalogState:
        async with build_api_client(api_url) as api:
            controller = CatalogController(api)
            controller.update_draft("title", title)
            controller.update_draft("author", author)
            controller.update_draft("description", description)
            return await controller.submit()

    state = asyncio.run(run())
    _exit_on_error(state)
    created = state.books[-1]
    console.print(f"[green]✅ Added '{escape(created.title)}' ({escape(created.id)})[/green]")


@books_app.command("delete")
def delete_book(
    book_id: str = typer.Argument(..., help="Identifier of the book to delete"),
    api_url: str | None = API_URL_OPTION,
) -> None:
    """Delete a book by id."""

    async def run() -> CatalogState:
        async with build_api_client(api_url) as api:
            return await CatalogController(api).delete(book_id)

    state = asyncio.run(run())
    _exit_on_error(state)
    console.print(f"[green]✅ Deleted {escape(book_id)}[/green]")


async def _prompt_new_book(controller: CatalogController) -> None:
    draft = controller.state.draft
    for name in ("title", "author", "description"):
        value = Prompt.ask(name.capitalize(), default=getattr(draft, name), console=console)
        controller.update_draft(name, value)
    await controller.submit()


async def _prompt_delete(controller: CatalogController) -> None:
    books = controller.state.books
    if not books:
        return
    choice = Prompt.ask(
        "Row to delete",
        choices=[str(i) for i in range(1, len(books) + 1)],
        console=console,
    )
    await controller.delete(books[int(choice) - 1].id)


async def _interactive(api_url: str | None) -> None:
    async with build_api_client(api_url) as api:
        controller = CatalogController(api)
        controller.subscribe(_show_pending)
        await controller.load_books()

        while True:
            state = controller.state
            console.rule("Book Catalog")
            if state.error_message:
                print_error(state.error_message)
            render_books(state.books, numbered=True)

            action = Prompt.ask(
                "[a]dd, [d]elete, [r]efresh or [q]uit",
                choices=["a", "d", "r", "q"],
                default="a",
                console=console,
            )
            if action == "q":
                return
            if action == "a":
                await _prompt_new_book(controller)
            elif action == "d":
                await _prompt_delete(controller)
            else:
                await controller.load_books()


@books_app.command("ui")
def interactive(api_url: str | None = API_URL_OPTION) -> None:
    """Interactive form-and-list view of the catalog."""
    try:
        asyncio.run(_interactive(api_url))
    except (KeyboardInterrupt, EOFError):
        console.print("\n[yellow]Bye[/yellow]")
