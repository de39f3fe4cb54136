"""API server commands: run it, prepare its database, mint tokens for it."""

import typer
from rich.panel import Panel
from rich.prompt import Confirm
from sqlalchemy.exc import SQLAlchemyError

from src.book_catalog.core.services import (
    DbManageService,
    JwtGenerationError,
    JwtGeneratorService,
)
from src.book_catalog.runtime.context import get_config

from .utils import console, print_error

server_app = typer.Typer(help="🚀 Run and administer the books API")


@server_app.command("serve")
def serve(
    host: str | None = typer.Option(None, help="Host to bind (defaults to app.host)"),
    port: int | None = typer.Option(None, help="Port to bind (defaults to app.port)"),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
    log_level: str = typer.Option(
        "info", help="Log level (debug, info, warning, error, critical)"
    ),
) -> None:
    """Start the FastAPI server with uvicorn."""
    import uvicorn

    config = get_config()
    host = host or config.app.host
    port = port or config.app.port

    console.print(
        Panel.fit(
            "[bold green]Starting Book Catalog API[/bold green]",
            border_style="green",
        )
    )
    console.print(f"[blue]Server will be available at:[/blue] http://{host}:{port}/api/books")
    console.print("[dim]Press Ctrl+C to stop the server[/dim]")

    uvicorn.run(
        "src.book_catalog.api.http.app:app",
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
        access_log=False,
    )


@server_app.command("init-db")
def init_db(
    drop: bool = typer.Option(False, "--drop", help="Drop existing tables first"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the drop confirmation"),
) -> None:
    """Create the books table in the configured database."""
    service = DbManageService()
    try:
        if drop:
            if not yes and not Confirm.ask(
                "Drop all book data before recreating the schema?", console=console
            ):
                console.print("[yellow]Aborted[/yellow]")
                raise typer.Exit(code=1)
            service.drop_all()
        service.create_all()
    except SQLAlchemyError as e:
        print_error(f"Database initialization failed: {e}")
        raise typer.Exit(code=1) from e
    console.print("[green]✅ Database ready[/green]")


@server_app.command("issue-token")
def issue_token(
    subject: str = typer.Argument(..., help="Subject (sub) the token is issued to"),
    scope: list[str] = typer.Option([], "--scope", "-s", help="Scope to grant (repeatable)"),
    expires_in: int | None = typer.Option(
        None, "--expires-in", help="Lifetime in seconds (defaults to auth.token_ttl_seconds)"
    ),
) -> None:
    """Mint a bearer token signed with auth.signing_secret."""
    generator = JwtGeneratorService(get_config().auth)
    try:
        token = generator.generate_access_token(
            subject, scopes=scope or None, expires_in_seconds=expires_in
        )
    except JwtGenerationError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    # Bare token on stdout so it can be piped into `auth login`
    typer.echo(token)
