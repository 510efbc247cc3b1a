"""Search page: artists, tracks and playlists with preview playback."""

from musicinsights.api.models import SearchResponse, Track
from musicinsights.context import AppContext
from musicinsights.views.base import Page, notify
from musicinsights.views.render import artist_table, playlist_table, track_table

SUGGESTIONS = ["A.R. Rahman", "Arijit Singh", "Bollywood Hits", "Classical Indian"]


class SearchPage(Page):
    title = "Search"

    def __init__(self, ctx: AppContext, query: str = ""):
        super().__init__(ctx)
        self.search = ctx.new_search()
        self.search.query = query

    @property
    def query(self) -> str:
        return self.search.query

    @property
    def results(self) -> SearchResponse:
        return self.search.results

    @property
    def tracks(self) -> list[Track]:
        return self.results.tracks.items if self.results.tracks else []

    async def load(self) -> None:
        await self.search.run(self.query)
        self._report_missing()

    def type(self, text: str) -> None:
        """Feed the current input text; the search itself is debounced."""
        self.search.submit(text)

    async def settle(self) -> None:
        """Wait for the debounced search to finish, then report failures."""
        await self.search.wait()
        self._report_missing()

    def toggle_preview(self, position: int) -> Track | None:
        """Play or pause the preview of the track at 1-based ``position``."""
        tracks = self.tracks
        if not 1 <= position <= len(tracks):
            return None
        track = tracks[position - 1]
        if not track.has_preview:
            notify(self.console, "No preview", f"{track} has no preview clip.")
            return track
        self.ctx.previews.toggle(track)
        return track

    def close(self) -> None:
        self.search.close()

    def _report_missing(self) -> None:
        if not self.query.strip():
            return
        missing = [
            name
            for name, page in (
                ("artists", self.results.artists),
                ("tracks", self.results.tracks),
                ("playlists", self.results.playlists),
            )
            if page is None
        ]
        if missing:
            notify(
                self.console,
                "Search incomplete",
                f"Could not load {', '.join(missing)}. Try again.",
                error=True,
            )

    def render(self) -> None:
        self.print_header("Discover artists, tracks, and playlists across all markets")

        if not self.query.strip():
            self.console.print("[dim]Try searching for:[/dim] " + ", ".join(SUGGESTIONS))
            return

        results = self.results
        counts = [
            f"{page.total} {name}"
            for name, page in (
                ("artists", results.artists),
                ("tracks", results.tracks),
                ("playlists", results.playlists),
            )
            if page is not None and page.total
        ]
        summary = f"[bold]{results.total} results for '{self.query}'[/bold]"
        if counts:
            summary += f" [dim]({', '.join(counts)})[/dim]"
        self.console.print(summary)
        self.console.print()

        # Failed categories are left out entirely; empty ones say so
        if results.artists is not None:
            if results.artists.items:
                self.console.print(artist_table(results.artists.items))
            else:
                self.console.print("[dim]No artists found[/dim]")

        if results.tracks is not None:
            if results.tracks.items:
                self.console.print(
                    track_table(
                        results.tracks.items,
                        playing=self.ctx.previews.currently_playing,
                    )
                )
            else:
                self.console.print("[dim]No tracks found[/dim]")

        if results.playlists is not None:
            if results.playlists.items:
                self.console.print(playlist_table(results.playlists.items))
            else:
                self.console.print("[dim]No playlists found[/dim]")
