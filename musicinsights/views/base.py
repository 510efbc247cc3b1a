"""Shared page plumbing: sections, fallbacks and notifications."""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from rich.console import Console

from musicinsights.api.client import AnalyticsAPIError

if TYPE_CHECKING:
    from musicinsights.context import AppContext

logger = logging.getLogger(__name__)

T = TypeVar("T")

MARKETS: dict[str, str] = {
    "IN": "India",
    "US": "United States",
    "GB": "United Kingdom",
    "CA": "Canada",
    "AU": "Australia",
    "DE": "Germany",
    "FR": "France",
    "BR": "Brazil",
}

# Markets offered outside the Compare page
PRIMARY_MARKETS = ["IN", "US", "GB", "CA", "AU"]

FIRST_YEAR = 2000
LAST_YEAR = 2025


def market_label(code: str) -> str:
    return MARKETS.get(code, code)


@dataclass
class Section(Generic[T]):
    """Data for one part of a page, plus how it was obtained."""

    data: T
    error: str | None = None
    is_demo: bool = False

    @property
    def failed(self) -> bool:
        return self.error is not None


async def fetch_section(request: Awaitable[T], fallback: T, demo: T | None = None) -> Section[T]:
    """Await ``request``; on an API error use ``demo`` if given, else ``fallback``."""
    try:
        return Section(await request)
    except AnalyticsAPIError as e:
        logger.warning("Falling back after failed request: %s", e)
        if demo is not None:
            return Section(demo, error=str(e), is_demo=True)
        return Section(fallback, error=str(e))


def notify(console: Console, title: str, description: str, error: bool = False) -> None:
    """Print a one-line, non-blocking notification."""
    color = "red" if error else "green"
    console.print(f"[{color}]{title}[/{color}] [dim]{description}[/dim]")


class Page:
    """Base class for dashboard pages.

    Subclasses fetch their data in :meth:`load` and draw it in :meth:`render`.
    A failed fetch never raises out of :meth:`load`; it is recorded on the
    page and reported with :func:`notify`.
    """

    title = ""

    def __init__(self, ctx: AppContext):
        self.ctx = ctx
        self.loading = False

    @property
    def console(self) -> Console:
        return self.ctx.console

    @property
    def demo_enabled(self) -> bool:
        return self.ctx.config.dashboard.demo_fallback

    async def load(self) -> None:
        raise NotImplementedError

    def render(self) -> None:
        raise NotImplementedError

    async def show(self) -> None:
        """Load and render the page."""
        self.loading = True
        try:
            with self.console.status(f"[cyan]Loading {self.title}...[/cyan]"):
                await self.load()
        finally:
            self.loading = False
        self.render()

    def report_failure(self, title: str, description: str, used_demo: bool = False) -> None:
        if used_demo:
            description += " Using demo data instead."
        notify(self.console, title, description, error=True)

    def print_header(self, subtitle: str = "") -> None:
        self.console.print()
        self.console.rule(f"[bold]{self.title}[/bold]", style="dim")
        if subtitle:
            self.console.print(f"[dim]{subtitle}[/dim]")
