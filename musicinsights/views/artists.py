"""Artists pages: top artists and a single artist's profile."""

import asyncio

from rich.panel import Panel

from musicinsights.api.models import Artist, TopArtistsResponse, TopTracksResponse
from musicinsights.context import AppContext
from musicinsights.views.base import Page, Section, fetch_section, market_label
from musicinsights.views.demo import DEMO_ARTISTS
from musicinsights.views.render import artist_table, track_table


class ArtistsPage(Page):
    title = "Artists"

    def __init__(self, ctx: AppContext, year: int, market: str | None = None, query: str = ""):
        super().__init__(ctx)
        self.year = year
        self.market = market or ctx.config.dashboard.market
        self.query = query
        self.artists: list[Artist] = []
        self.is_demo = False

    @property
    def filtered(self) -> list[Artist]:
        if not self.query:
            return self.artists
        return [a for a in self.artists if a.matches(self.query)]

    @property
    def average_popularity(self) -> float:
        if not self.artists:
            return 0.0
        return sum(a.popularity for a in self.artists) / len(self.artists)

    @property
    def superstar_count(self) -> int:
        return sum(1 for a in self.artists if a.popularity >= 90)

    async def load(self) -> None:
        section = await fetch_section(
            self.ctx.client.get_top_artists(self.year, self.market),
            TopArtistsResponse(artists=[]),
            demo=TopArtistsResponse(artists=DEMO_ARTISTS) if self.demo_enabled else None,
        )
        self.artists = section.data.artists
        self.is_demo = section.is_demo

        # An empty chart is shown as demo data too, when enabled
        if not section.failed and not self.artists and self.demo_enabled:
            self.artists = list(DEMO_ARTISTS)
            self.is_demo = True

        if section.failed:
            self.report_failure("Error loading artists", "Failed to load artists.", used_demo=section.is_demo)

    def render(self) -> None:
        subtitle = f"{self.year} - {market_label(self.market)}"
        if self.is_demo:
            subtitle += " (demo data)"
        self.print_header(subtitle)
        self.console.print(
            f"[bold]Total Artists:[/bold] {len(self.artists)}   "
            f"[bold]Average Popularity:[/bold] {self.average_popularity:.0f}   "
            f"[bold]Superstars:[/bold] {self.superstar_count}"
        )
        self.console.print()

        artists = self.filtered
        if artists:
            self.console.print(artist_table(artists))
        elif self.query:
            self.console.print(f"[dim]No artists match '{self.query}'[/dim]")
        else:
            self.console.print("[dim]No artists found[/dim]")


class ArtistDetailPage(Page):
    title = "Artist"

    def __init__(self, ctx: AppContext, artist_id: str, market: str | None = None):
        super().__init__(ctx)
        self.artist_id = artist_id
        self.market = market or ctx.config.dashboard.market
        self.artist: Section[Artist | None] | None = None
        self.top_tracks: Section[TopTracksResponse] | None = None

    async def load(self) -> None:
        client = self.ctx.client
        self.artist, self.top_tracks = await asyncio.gather(
            fetch_section(client.get_artist(self.artist_id), None),
            fetch_section(
                client.get_artist_top_tracks(self.artist_id, self.market),
                TopTracksResponse(tracks=[]),
            ),
        )
        if self.artist.failed or self.top_tracks.failed:
            self.report_failure("Error loading artist", "Some artist data could not be loaded.")

    def render(self) -> None:
        artist = self.artist.data if self.artist else None
        self.print_header(artist.name if artist else self.artist_id)
        if artist is not None:
            self.console.print(
                Panel(
                    f"[bold]{artist.name}[/bold]\n"
                    f"{artist.follower_count:,} followers\n"
                    f"Popularity: {artist.popularity} ({artist.popularity_label})\n"
                    f"Genres: {', '.join(artist.genres) or '-'}\n"
                    f"[dim]{artist.external_url}[/dim]",
                    border_style="green",
                )
            )
        tracks = self.top_tracks.data.tracks if self.top_tracks else []
        self.console.print(
            track_table(tracks, title="Top Tracks", playing=self.ctx.previews.currently_playing)
        )
