"""Rich renderables for dashboard pages."""

from datetime import datetime

from rich.columns import Columns
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from musicinsights.api.models import Artist, Genre, GenreMarketShare, KPIStats, Playlist, Track

BAR_WIDTH = 20


def truncate(text: str, length: int = 20) -> str:
    return text if len(text) <= length else text[:length] + "..."


def format_date(value: str) -> str:
    """Format an ISO date as e.g. "19 October 2026"."""
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return "Recently"
    return f"{parsed.day} {parsed:%B %Y}"


def bar(value: float, max_value: float = 100.0, width: int = BAR_WIDTH) -> str:
    """Horizontal bar of ``width`` cells filled in proportion to ``value``."""
    if max_value <= 0:
        return "░" * width
    filled = round(width * min(max(value, 0.0), max_value) / max_value)
    return "█" * filled + "░" * (width - filled)


def popularity_color(popularity: int) -> str:
    if popularity >= 90:
        return "green"
    elif popularity >= 80:
        return "yellow"
    elif popularity >= 70:
        return "blue"
    else:
        return "dim"


def track_table(
    tracks: list[Track],
    title: str = "Tracks",
    show_rank: bool = True,
    playing: str | None = None,
) -> Table:
    """Track list with preview markers. ``playing`` is the id of the playing track."""
    table = Table(title=f"{title} [dim]({len(tracks)} tracks)[/dim]", show_lines=False)
    if show_rank:
        table.add_column("#", style="dim", width=3, justify="right")
    table.add_column("", width=1)
    table.add_column("Track", style="cyan")
    table.add_column("Artists")
    table.add_column("Album", style="dim")
    table.add_column("Year", width=4)
    table.add_column("Popularity", justify="right")

    for index, track in enumerate(tracks, 1):
        if track.id == playing:
            marker = "[green]▶[/green]"
        elif track.has_preview:
            marker = "[dim]♪[/dim]"
        else:
            marker = ""
        row = [
            marker,
            track.name,
            track.artist_names,
            track.album.name,
            track.album.release_year,
            f"[{popularity_color(track.popularity)}]{track.popularity}[/]",
        ]
        if show_rank:
            row.insert(0, str(track.rank or index))
        table.add_row(*row)

    return table


def artist_table(artists: list[Artist], title: str = "Artists") -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column("#", style="dim", width=3, justify="right")
    table.add_column("Artist", style="cyan")
    table.add_column("Followers", justify="right")
    table.add_column("Genres", style="dim")
    table.add_column("Popularity", justify="right")

    for index, artist in enumerate(artists, 1):
        color = popularity_color(artist.popularity)
        table.add_row(
            str(index),
            artist.name,
            f"{artist.follower_count:,}",
            ", ".join(artist.genres[:3]),
            f"[{color}]{artist.popularity} {artist.popularity_label}[/{color}]",
        )

    return table


def playlist_table(playlists: list[Playlist], title: str = "Playlists") -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column("Playlist", style="cyan")
    table.add_column("Owner", style="dim")
    table.add_column("Tracks", justify="right")

    for playlist in playlists:
        table.add_row(playlist.name, playlist.owner_name, str(playlist.track_count))

    return table


def genre_table(genres: list[Genre], title: str = "Top Genres") -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column("Genre", style="cyan")
    table.add_column("Tracks", justify="right")
    table.add_column("Share")
    table.add_column("%", justify="right")

    max_share = max((g.percentage for g in genres), default=0.0)
    for genre in genres:
        table.add_row(
            genre.name,
            str(genre.count),
            f"[green]{bar(genre.percentage, max_share)}[/green]",
            f"{genre.percentage:.1f}",
        )

    return table


def bar_chart(title: str, rows: list[tuple[str, float]], unit: str = "") -> Table:
    """Single-series horizontal bar chart."""
    table = Table(title=title, show_header=False, box=None, padding=(0, 1))
    table.add_column("Label", style="cyan", no_wrap=True)
    table.add_column("Bar")
    table.add_column("Value", justify="right")

    max_value = max((value for _, value in rows), default=0.0)
    for label, value in rows:
        table.add_row(label, f"[green]{bar(value, max_value)}[/green]", f"{value:g}{unit}")

    return table


def market_chart(title: str, rows: list[GenreMarketShare], markets: list[str]) -> Table:
    """Grouped bar chart: one row per genre, one bar column per market."""
    table = Table(title=title, show_lines=False)
    table.add_column("Genre", style="cyan", no_wrap=True)
    for market in markets:
        table.add_column(market)

    max_value = max((r.share(m) for r in rows for m in markets), default=0.0)
    for row in rows:
        table.add_row(
            row.name,
            *(
                f"[green]{bar(row.share(m), max_value, width=10)}[/green] {row.share(m):g}%"
                for m in markets
            ),
        )

    return table


def kpi_cards(kpi: KPIStats) -> Columns:
    """Headline stats as a row of panels."""
    cards = [
        ("Last Updated", format_date(kpi.last_snapshot_date), "Data snapshot"),
        ("Total Tracks", f"{kpi.total_tracks:,}", "In database"),
        ("Total Artists", f"{kpi.total_artists:,}", "Unique artists"),
        ("Genres Tracked", str(kpi.total_genres), "Music categories"),
    ]
    return Columns(
        [
            Panel(
                Text.assemble((value, "bold"), "\n", (subtitle, "dim")),
                title=title,
                title_align="left",
                border_style="green",
            )
            for title, value, subtitle in cards
        ],
        equal=True,
    )
