"""Year explorer page: yearly charts per market."""

from enum import Enum

from musicinsights.api.models import (
    Artist,
    ChartResponse,
    Genre,
    TopArtistsResponse,
    TopGenresResponse,
    Track,
)
from musicinsights.context import AppContext
from musicinsights.views.base import Page, Section, fetch_section, market_label
from musicinsights.views.render import (
    artist_table,
    bar_chart,
    genre_table,
    track_table,
    truncate,
)

CHART_SIZE = 10


class YearTab(str, Enum):
    TRACKS = "tracks"
    ARTISTS = "artists"
    GENRES = "genres"


class YearExplorerPage(Page):
    """Only the active tab's data is fetched."""

    title = "Year Explorer"

    def __init__(
        self,
        ctx: AppContext,
        year: int,
        market: str | None = None,
        tab: YearTab = YearTab.TRACKS,
    ):
        super().__init__(ctx)
        self.year = year
        self.market = market or ctx.config.dashboard.market
        self.tab = tab
        self.tracks: list[Track] = []
        self.artists: list[Artist] = []
        self.genres: list[Genre] = []
        self.section: Section | None = None

    async def load(self) -> None:
        client = self.ctx.client
        if self.tab is YearTab.TRACKS:
            section = await fetch_section(
                client.get_top_year(self.year, self.market), ChartResponse(tracks=[])
            )
            self.tracks = section.data.tracks
        elif self.tab is YearTab.ARTISTS:
            section = await fetch_section(
                client.get_top_artists(self.year, self.market), TopArtistsResponse(artists=[])
            )
            self.artists = section.data.artists
        else:
            section = await fetch_section(
                client.get_top_genres(self.year, self.market), TopGenresResponse(genres=[])
            )
            self.genres = section.data.genres

        self.section = section
        if section.failed:
            self.report_failure("Error loading data", "Failed to load year data. Please try again.")

    def chart_data(self) -> list[tuple[str, float]]:
        if self.tab is YearTab.TRACKS:
            return [(truncate(t.name), t.popularity) for t in self.tracks[:CHART_SIZE]]
        elif self.tab is YearTab.ARTISTS:
            return [(truncate(a.name), a.popularity) for a in self.artists[:CHART_SIZE]]
        else:
            return [(g.name, g.percentage) for g in self.genres]

    def render(self) -> None:
        self.print_header(f"{self.year} - {market_label(self.market)}")
        if self.tab is YearTab.GENRES:
            self.console.print(bar_chart("Genre Share", self.chart_data(), unit="%"))
            self.console.print()
            self.console.print(genre_table(self.genres))
            return

        self.console.print(bar_chart("Popularity", self.chart_data()))
        self.console.print()
        if self.tab is YearTab.TRACKS:
            self.console.print(
                track_table(
                    self.tracks,
                    title=f"Top Tracks of {self.year}",
                    playing=self.ctx.previews.currently_playing,
                )
            )
        else:
            self.console.print(artist_table(self.artists, title=f"Top Artists of {self.year}"))
