"""Bearer token management for the terminal client."""

import typer
from rich.markup import escape

from .utils import console, get_token_store, print_error

auth_app = typer.Typer(help="🔑 Manage the bearer token sent to the books API")


@auth_app.command("login")
def login(
    token: str = typer.Argument(..., help="Bearer token to store for later requests"),
) -> None:
    """Store a bearer token; every following request carries it."""
    store = get_token_store()
    try:
        store.save(token)
    except (ValueError, OSError) as e:
        print_error(f"Could not store token: {e}")
        raise typer.Exit(code=1) from e
    console.print(f"[green]✅ Token saved to {escape(str(store.path))}[/green]")


@auth_app.command("logout")
def logout() -> None:
    """Forget the stored bearer token."""
    if get_token_store().clear():
        console.print("[green]✅ Token removed[/green]")
    else:
        console.print("[yellow]No stored token[/yellow]")
