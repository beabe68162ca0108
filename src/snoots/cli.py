"""snoots CLI - OAuth bootstrap and ad-hoc requests."""

import asyncio
import json
import logging
from typing import NoReturn

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .client import Client
from .config import SnootsSettings
from .errors import SnootsError

app = typer.Typer(
    name="snoots",
    help="Reddit API client - OAuth helpers and raw requests",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output")):
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


def _fail(message: str) -> NoReturn:
    console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(1)


@app.command("auth-url")
def auth_url(
    scope: list[str] = typer.Option(None, "--scope", "-s", help="Scope to request (repeatable)"),
    state: str = typer.Option("snoots", help="CSRF state echoed back on redirect"),
    temporary: bool = typer.Option(False, "--temporary", help="Request a one hour grant"),
    redirect_uri: str = typer.Option(None, help="Overrides SNOOTS_REDIRECT_URI"),
):
    """Print the URL a user visits to authorize the app."""
    settings = SnootsSettings()
    if not settings.client_id:
        _fail("SNOOTS_CLIENT_ID is not set")

    url = Client.make_auth_url(
        settings.client_id,
        scope or settings.scope_list,
        redirect_uri or settings.redirect_uri,
        state=state,
        temporary=temporary,
        base_url=settings.reddit_url,
    )
    console.print("[bold cyan]Authorize URL[/bold cyan] (open it in a browser):")
    console.print(url, soft_wrap=True, highlight=False)


@app.command("exchange")
def exchange(
    code: str = typer.Argument(..., help="The code Reddit redirected back with"),
    redirect_uri: str = typer.Option(None, help="Overrides SNOOTS_REDIRECT_URI"),
):
    """Exchange an authorization code and print the refresh token."""
    settings = SnootsSettings()

    async def _exchange() -> str | None:
        client = await Client.from_auth_code(
            code,
            redirect_uri or settings.redirect_uri,
            user_agent=settings.user_agent,
            creds=settings.creds,
            settings=settings,
        )
        async with client:
            return client.get_refresh_token()

    try:
        refresh_token = asyncio.run(_exchange())
    except SnootsError as e:
        _fail(str(e))

    if refresh_token:
        console.print(
            Panel(
                f"{refresh_token}\n\n[dim]Set SNOOTS_REFRESH_TOKEN to resume this session.[/dim]",
                title="Refresh token",
            )
        )
    else:
        console.print("[yellow]No refresh token issued (temporary grant).[/yellow]")


@app.command("get")
def get(
    path: str = typer.Argument(..., help="API path, e.g. api/v1/me or r/python/about"),
    query: list[str] = typer.Option(None, "--query", "-q", help="key=value query parameter"),
):
    """Perform a GET request with the configured client."""
    params: dict[str, str] = {}
    for item in query or []:
        if "=" not in item:
            _fail(f"Invalid query parameter {item!r}, expected key=value")
        key, value = item.split("=", 1)
        params[key] = value

    async def _get():
        async with Client.from_settings() as client:
            return await client.get(path, params), client.rate_limit

    try:
        result, rate_limit = asyncio.run(_get())
    except SnootsError as e:
        _fail(str(e))

    console.print_json(json.dumps(result))

    if rate_limit:
        table = Table(title="Rate limit")
        table.add_column("Remaining", style="cyan")
        table.add_column("Used", style="yellow")
        table.add_column("Resets in", style="green")
        table.add_row(
            str(rate_limit.remaining),
            str(rate_limit.used) if rate_limit.used is not None else "-",
            f"{rate_limit.resets_in:.0f}s",
        )
        console.print(table)


if __name__ == "__main__":
    app()
