"""Main CLI application module."""

import typer

from .auth_commands import auth_app
from .book_commands import books_app
from .server_commands import server_app

# Create the main CLI application
app = typer.Typer(
    help="📚 Book Catalog CLI - terminal client and API administration",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register command groups
app.add_typer(books_app, name="books")
app.add_typer(auth_app, name="auth")
app.add_typer(server_app, name="server")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
