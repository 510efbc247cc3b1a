"""Command-line interface for the music insights dashboard."""

import asyncio
import logging
from collections.abc import Coroutine
from datetime import datetime
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Prompt

from musicinsights.api.client import AnalyticsAPIError
from musicinsights.config import load_config
from musicinsights.context import AppContext
from musicinsights.playback import PlaybackError
from musicinsights.session import SessionError, password_strength
from musicinsights.views import (
    MARKETS,
    ArtistDetailPage,
    ArtistsPage,
    ComparePage,
    OverviewPage,
    SearchPage,
    YearExplorerPage,
    YearTab,
)
from musicinsights.views.base import FIRST_YEAR, LAST_YEAR, notify

app = typer.Typer(
    name="musicinsights",
    help="Music streaming analytics: charts, artists, genres and market comparisons.",
    no_args_is_help=True,
)
console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Route log records through Rich. WARNING by default, DEBUG when verbose."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = RichHandler(rich_tracebacks=True, show_path=False, console=console)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root_logger.addHandler(handler)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def default_year() -> int:
    return min(datetime.now().year, LAST_YEAR)


def validate_market(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    code = value.upper()
    if code not in MARKETS:
        raise typer.BadParameter(f"Unknown market '{value}'. Choose from: {', '.join(MARKETS)}")
    return code


def validate_markets(values: Optional[list[str]]) -> Optional[list[str]]:
    if not values:
        return None
    return [validate_market(v) for v in values]


VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Show debug logging"),
]
MarketOption = Annotated[
    Optional[str],
    typer.Option("--market", "-m", help="Two-letter market code", callback=validate_market),
]
YearOption = Annotated[
    Optional[int],
    typer.Option("--year", "-y", min=FIRST_YEAR, max=LAST_YEAR, help="Chart year"),
]


def make_context(verbose: bool = False) -> AppContext:
    config = load_config()
    setup_logging(verbose or config.verbose)
    return AppContext(config=config, console=console)


def run(coro: Coroutine[Any, Any, Any]) -> Any:
    """Run a coroutine, turning expected failures into a clean exit."""
    try:
        return asyncio.run(coro)
    except SessionError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except AnalyticsAPIError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


async def show_page(ctx: AppContext, page_type: type, *args: Any, **kwargs: Any) -> None:
    async with ctx:
        ctx.require_session()
        await page_type(ctx, *args, **kwargs).show()


@app.command()
def overview(market: MarketOption = None, verbose: VerboseOption = False) -> None:
    """Headline stats and today's top tracks."""
    ctx = make_context(verbose)
    run(show_page(ctx, OverviewPage, market))


@app.command()
def year(
    year: YearOption = None,
    market: MarketOption = None,
    tab: Annotated[
        YearTab,
        typer.Option("--tab", "-t", help="Which chart to show"),
    ] = YearTab.TRACKS,
    verbose: VerboseOption = False,
) -> None:
    """Explore the top tracks, artists or genres of a year."""
    ctx = make_context(verbose)
    run(show_page(ctx, YearExplorerPage, year or default_year(), market, tab))


@app.command()
def artists(
    year: YearOption = None,
    market: MarketOption = None,
    filter_text: Annotated[
        str,
        typer.Option("--filter", "-f", help="Only artists whose name or genre contains this"),
    ] = "",
    verbose: VerboseOption = False,
) -> None:
    """Top artists of a year."""
    ctx = make_context(verbose)
    run(show_page(ctx, ArtistsPage, year or default_year(), market, filter_text))


@app.command()
def artist(
    artist_id: Annotated[str, typer.Argument(help="Artist ID")],
    market: MarketOption = None,
    verbose: VerboseOption = False,
) -> None:
    """An artist's profile and top tracks."""
    ctx = make_context(verbose)
    run(show_page(ctx, ArtistDetailPage, artist_id, market))


@app.command()
def compare(
    year: YearOption = None,
    markets: Annotated[
        Optional[list[str]],
        typer.Option(
            "--market",
            "-m",
            help="Market to compare (repeatable, default IN, US, GB)",
            callback=validate_markets,
        ),
    ] = None,
    verbose: VerboseOption = False,
) -> None:
    """Compare genre share across markets."""
    ctx = make_context(verbose)
    run(show_page(ctx, ComparePage, year or default_year(), markets))


async def interactive_search(ctx: AppContext) -> None:
    async with ctx:
        ctx.require_session()
        page = SearchPage(ctx)
        page.render()
        console.print(
            "[dim]Type a query. ':play N' toggles a preview, ':clear' resets, ':quit' exits.[/dim]"
        )
        try:
            while True:
                text = await asyncio.to_thread(
                    Prompt.ask, "[cyan]search[/cyan]", console=console, default=""
                )
                command = text.strip()

                if command in (":quit", ":q"):
                    break
                elif command == ":clear":
                    page.search.clear()
                elif command.startswith(":play"):
                    _, _, position = command.partition(" ")
                    if not position.strip().isdigit():
                        console.print("[red]Usage:[/red] :play N")
                        continue
                    try:
                        track = page.toggle_preview(int(position))
                    except PlaybackError as e:
                        console.print(f"[red]Error:[/red] {e}")
                        continue
                    if track is None:
                        console.print(f"[red]No track at position {position.strip()}[/red]")
                        continue
                else:
                    page.type(text)
                    await page.settle()

                page.render()
        finally:
            page.close()


@app.command()
def search(
    query: Annotated[Optional[str], typer.Argument(help="Search text")] = None,
    interactive: Annotated[
        bool,
        typer.Option("--interactive", "-i", help="Search as you type, with previews"),
    ] = False,
    verbose: VerboseOption = False,
) -> None:
    """Search artists, tracks and playlists."""
    ctx = make_context(verbose)
    if interactive:
        run(interactive_search(ctx))
    elif query is None:
        console.print("[red]Error:[/red] Give a QUERY or use --interactive")
        raise typer.Exit(1)
    else:
        run(show_page(ctx, SearchPage, query))


@app.command()
def login(
    email: Annotated[str, typer.Option("--email", "-e", prompt=True, help="Email address")],
    password: Annotated[
        str,
        typer.Option("--password", "-p", prompt=True, hide_input=True, help="Password"),
    ],
    remember: Annotated[
        bool,
        typer.Option("--remember", "-r", help="Remember the email address"),
    ] = False,
) -> None:
    """Sign in to the dashboard."""
    ctx = make_context()
    try:
        ctx.session.login(email, password, remember=remember)
    except SessionError as e:
        notify(console, "Missing fields", str(e), error=True)
        raise typer.Exit(1)
    notify(console, "Login successful!", "Welcome back to Music Insights.")


@app.command()
def register(
    first_name: Annotated[str, typer.Option("--first-name", prompt=True)],
    last_name: Annotated[str, typer.Option("--last-name", prompt=True)],
    email: Annotated[str, typer.Option("--email", "-e", prompt=True)],
    password: Annotated[str, typer.Option("--password", "-p", prompt=True, hide_input=True)],
    confirm_password: Annotated[
        str,
        typer.Option("--confirm-password", prompt="Confirm password", hide_input=True),
    ],
    agree_to_terms: Annotated[
        bool,
        typer.Option("--agree-terms", help="Accept the terms and conditions"),
    ] = False,
) -> None:
    """Create an account."""
    ctx = make_context()
    try:
        address = ctx.session.register(
            first_name, last_name, email, password, confirm_password, agree_to_terms
        )
    except SessionError as e:
        notify(console, "Registration failed", str(e), error=True)
        raise typer.Exit(1)

    _, strength = password_strength(password)
    console.print(f"[dim]Password strength: {strength}[/dim]")
    notify(
        console,
        "Account created successfully!",
        f"Sign in with 'musicinsights login -e {address}'.",
    )


@app.command()
def logout() -> None:
    """Sign out."""
    ctx = make_context()
    if ctx.logout():
        notify(console, "Logged out successfully", "You have been signed out of your account.")
    else:
        console.print("[dim]Not signed in[/dim]")


@app.command()
def whoami() -> None:
    """Show the current session."""
    ctx = make_context()
    session = ctx.session.load()
    if session is None or not session.authenticated:
        console.print("[dim]Not signed in[/dim]")
        raise typer.Exit(1)
    console.print(f"[green]Signed in[/green] {session.email or ''}".rstrip())
    console.print(f"[dim]Since {session.signed_in_at:%Y-%m-%d %H:%M} UTC[/dim]")


if __name__ == "__main__":
    app()
