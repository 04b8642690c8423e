"""Command-line interface for StickyBoard."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated, Any, Awaitable, Callable

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from stickyboard import __version__
from stickyboard.config import StickyBoardSettings, load_settings
from stickyboard.credentials import get_credential_store_label
from stickyboard.errors import APIError
from stickyboard.logging import setup_logging
from stickyboard.session import Session
from stickyboard.tokens import CredentialTokenStore

app = typer.Typer(
    name="stickyboard",
    help="Command-line client for StickyBoard boards.",
    no_args_is_help=True,
)
console = Console(width=min(100, Console().width))


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"stickyboard {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version", "-V",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging on the terminal."),
    ] = False,
    log_dir: Annotated[
        Path | None,
        typer.Option(
            "--log-dir",
            envvar="STICKYBOARD_LOG_DIR",
            help="Also write a rotating stickyboard.log into this directory.",
        ),
    ] = None,
) -> None:
    """Command-line client for StickyBoard boards."""
    setup_logging(log_dir=log_dir, verbose=verbose)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _open_session(settings: StickyBoardSettings) -> Session:
    return Session.create(settings)


def _storage_label(session: Session) -> str:
    store = session.token_store
    if isinstance(store, CredentialTokenStore):
        return get_credential_store_label(store.credentials)
    return type(store).__name__


def _run(command: Callable[[Session], Awaitable[Any]], base_url: str | None = None) -> Any:
    """Run one async command against a fresh session, rendering its errors.

    API errors, invalid settings (``ValueError``) and a missing keychain
    (``RuntimeError``) are printed as one line and exit with status 1.
    """

    async def _go() -> Any:
        settings = load_settings(base_url=base_url)
        async with _open_session(settings) as session:
            return await command(session)

    try:
        return asyncio.run(_go())
    except (APIError, ValueError, RuntimeError) as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from None


_BaseUrlOption = Annotated[
    str | None,
    typer.Option("--base-url", help="API base URL (default from STICKYBOARD_BASE_URL)."),
]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def login(
    email: Annotated[str | None, typer.Option("--email", "-e", help="Account email.")] = None,
    password: Annotated[
        str | None,
        typer.Option("--password", "-p", help="Password (prompted if omitted)."),
    ] = None,
    base_url: _BaseUrlOption = None,
) -> None:
    """Sign in and store the session tokens in the system credential store."""
    if email is None:
        email = typer.prompt("Email")
    if password is None:
        password = typer.prompt("Password", hide_input=True)

    async def _login(session: Session) -> Any:
        user = await session.login(email, password)
        return user, _storage_label(session)

    user, storage = _run(_login, base_url)
    console.print(f"[green]Signed in[/green] as {user.display_name} <{user.email}>")
    console.print(f"[dim]Tokens saved to {storage}[/dim]")


@app.command()
def logout(base_url: _BaseUrlOption = None) -> None:
    """Sign out and remove stored tokens."""
    _run(lambda session: session.logout(), base_url)
    console.print("Signed out")


@app.command()
def whoami(base_url: _BaseUrlOption = None) -> None:
    """Show the signed-in user."""

    async def _whoami(session: Session) -> Any:
        if session.auth_manager.tokens.is_empty:
            return None
        return await session.auth.me()

    user = _run(_whoami, base_url)
    if user is None:
        console.print("Not signed in. Run [bold]stickyboard login[/bold].")
        raise typer.Exit(1)
    console.print(f"{user.display_name} <{user.email}>")
    console.print(f"[dim]id {user.id} · member since {user.created_at:%Y-%m-%d}[/dim]")


@app.command()
def refresh(base_url: _BaseUrlOption = None) -> None:
    """Exchange the stored refresh token for a new token pair."""

    async def _refresh(session: Session) -> bool:
        if not session.auth_manager.has_refresh_token():
            return False
        await session.auth.refresh()
        return True

    if not _run(_refresh, base_url):
        console.print("No refresh token stored. Run [bold]stickyboard login[/bold].")
        raise typer.Exit(1)
    console.print("[green]Tokens refreshed[/green]")


@app.command()
def boards(
    search: Annotated[
        str | None,
        typer.Option("--search", "-s", help="Filter accessible boards by keyword."),
    ] = None,
    mine: Annotated[bool, typer.Option("--mine", help="Only boards you own.")] = False,
    base_url: _BaseUrlOption = None,
) -> None:
    """List boards."""

    async def _boards(session: Session) -> Any:
        if search:
            return await session.boards.search(search)
        if mine:
            return await session.boards.get_mine()
        return await session.boards.get_accessible()

    results = _run(_boards, base_url)
    if not results:
        console.print("[dim]No boards[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Title")
    table.add_column("Visibility")
    table.add_column("Updated")
    table.add_column("ID", style="dim")
    for board in results:
        table.add_row(
            board.title,
            board.visibility.name.lower(),
            f"{board.updated_at:%Y-%m-%d %H:%M}",
            str(board.id),
        )
    console.print(table)
