"""Compare page: genre share across markets."""

from musicinsights.api.models import GenreComparison, GenreMarketShare
from musicinsights.context import AppContext
from musicinsights.views.base import Page, fetch_section, market_label
from musicinsights.views.demo import DEMO_GENRE_COMPARISON
from musicinsights.views.render import market_chart

DEFAULT_MARKETS = ["IN", "US", "GB"]


class ComparePage(Page):
    title = "Compare Markets"

    def __init__(self, ctx: AppContext, year: int, markets: list[str] | None = None):
        super().__init__(ctx)
        self.year = year
        self.markets = list(dict.fromkeys(DEFAULT_MARKETS if markets is None else markets))
        self.rows: list[GenreMarketShare] = []
        self.is_demo = False

    async def load(self) -> None:
        if not self.markets:
            self.rows = []
            return

        section = await fetch_section(
            self.ctx.client.compare_genres(self.year, self.markets),
            GenreComparison(),
            demo=DEMO_GENRE_COMPARISON if self.demo_enabled else None,
        )
        comparison = section.data
        self.is_demo = section.is_demo

        if not section.failed and not comparison.genres and self.demo_enabled:
            comparison = DEMO_GENRE_COMPARISON
            self.is_demo = True

        self.rows = comparison.for_markets(self.markets)

        if section.failed:
            self.report_failure(
                "Error loading data",
                "Failed to load market comparison.",
                used_demo=section.is_demo,
            )

    def leaders(self) -> dict[str, str]:
        """Genre with the highest share in each market."""
        result: dict[str, str] = {}
        for market in self.markets:
            best = max(self.rows, key=lambda r: r.share(market), default=None)
            if best is not None and best.share(market) > 0:
                result[market] = best.name
        return result

    def render(self) -> None:
        subtitle = f"{self.year} - " + ", ".join(market_label(m) for m in self.markets)
        if self.is_demo:
            subtitle += " (demo data)"
        self.print_header(subtitle)

        if not self.markets:
            self.console.print("[dim]Select at least one market to compare[/dim]")
            return
        if not self.rows:
            self.console.print("[dim]No comparison data available[/dim]")
            return

        self.console.print(market_chart("Genre Share by Market", self.rows, self.markets))
        self.console.print()
        for market, genre in self.leaders().items():
            self.console.print(f"[bold]{market_label(market)}:[/bold] {genre}")
