"""Overview page: headline stats and today's chart."""

import asyncio
from datetime import UTC, datetime

from musicinsights.api.models import ChartResponse, KPIStats, Track
from musicinsights.context import AppContext
from musicinsights.views.base import Page, Section, fetch_section, market_label
from musicinsights.views.demo import demo_kpi
from musicinsights.views.render import kpi_cards, track_table


def empty_kpi() -> KPIStats:
    return KPIStats(
        last_snapshot_date=datetime.now(UTC).isoformat(),
        total_tracks=0,
        total_artists=0,
        total_genres=0,
    )


class OverviewPage(Page):
    title = "Overview"

    def __init__(self, ctx: AppContext, market: str | None = None):
        super().__init__(ctx)
        self.market = market or ctx.config.dashboard.market
        self.chart: Section[ChartResponse] | None = None
        self.kpi: Section[KPIStats] | None = None

    @property
    def top_tracks(self) -> list[Track]:
        if self.chart is None:
            return []
        return self.chart.data.tracks[: self.ctx.config.dashboard.top_tracks]

    async def load(self) -> None:
        client = self.ctx.client
        self.chart, self.kpi = await asyncio.gather(
            fetch_section(client.get_top_today(self.market), ChartResponse(tracks=[])),
            fetch_section(
                client.get_kpi_stats(),
                empty_kpi(),
                demo=demo_kpi() if self.demo_enabled else None,
            ),
        )
        if self.chart.failed or self.kpi.failed:
            self.report_failure(
                "Error loading data",
                "Failed to load overview data.",
                used_demo=self.kpi.is_demo,
            )

    def render(self) -> None:
        self.print_header("Trends and performance across music streaming markets")
        if self.kpi is not None:
            self.console.print(kpi_cards(self.kpi.data))
        self.console.print()
        limit = self.ctx.config.dashboard.top_tracks
        self.console.print(
            track_table(
                self.top_tracks,
                title=f"Today's Top {limit} - {market_label(self.market)}",
                playing=self.ctx.previews.currently_playing,
            )
        )
