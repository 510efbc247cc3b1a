"""Data models for analytics API entities."""

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

PLACEHOLDER_IMAGE = "/placeholder.svg"

SearchType = Literal["artist", "track", "playlist"]

T = TypeVar("T")


class _Snapshot(BaseModel):
    """Read-only snapshot of an API entity."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class Image(_Snapshot):
    url: str
    height: int | None = None
    width: int | None = None


class ExternalUrls(_Snapshot):
    spotify: str = ""


class TrackArtist(_Snapshot):
    id: str
    name: str


class Album(_Snapshot):
    id: str
    name: str
    images: list[Image] = Field(default_factory=list)
    release_date: str = ""

    @property
    def release_year(self) -> str:
        """Year part of the release date, or the raw value if it has none."""
        year = self.release_date[:4]
        return year if year.isdigit() else self.release_date


class Track(_Snapshot):
    """A track from a chart, an artist page or a search."""

    id: str
    name: str
    artists: list[TrackArtist] = Field(default_factory=list)
    album: Album
    preview_url: str | None = None
    external_urls: ExternalUrls = Field(default_factory=ExternalUrls)
    popularity: int = Field(ge=0, le=100)
    rank: int | None = None

    @property
    def artist_names(self) -> str:
        return ", ".join(artist.name for artist in self.artists)

    @property
    def image_url(self) -> str:
        return self.album.images[0].url if self.album.images else PLACEHOLDER_IMAGE

    @property
    def external_url(self) -> str:
        return self.external_urls.spotify

    @property
    def has_preview(self) -> bool:
        return bool(self.preview_url)

    def __str__(self) -> str:
        return f"{self.artist_names} - {self.name}"


class Followers(_Snapshot):
    total: int = 0


class Artist(_Snapshot):
    """An artist with popularity and follower stats."""

    id: str
    name: str
    images: list[Image] = Field(default_factory=list)
    followers: Followers = Field(default_factory=Followers)
    popularity: int = Field(ge=0, le=100)
    external_urls: ExternalUrls = Field(default_factory=ExternalUrls)
    genres: list[str] = Field(default_factory=list)

    @property
    def follower_count(self) -> int:
        return self.followers.total

    @property
    def image_url(self) -> str:
        return self.images[0].url if self.images else PLACEHOLDER_IMAGE

    @property
    def external_url(self) -> str:
        return self.external_urls.spotify

    @property
    def popularity_label(self) -> str:
        if self.popularity >= 90:
            return "Superstar"
        elif self.popularity >= 80:
            return "Popular"
        elif self.popularity >= 70:
            return "Rising"
        else:
            return "Emerging"

    def matches(self, text: str) -> bool:
        """Case-insensitive substring match on the name or any genre."""
        needle = text.lower()
        return needle in self.name.lower() or any(needle in g.lower() for g in self.genres)

    def __str__(self) -> str:
        return self.name


class Genre(_Snapshot):
    name: str
    count: int = Field(ge=0)
    percentage: float = Field(ge=0)


class PlaylistOwner(_Snapshot):
    display_name: str | None = None


class PlaylistTracks(_Snapshot):
    total: int = 0


class Playlist(_Snapshot):
    """A playlist search hit. The API sends loosely shaped items."""

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str = ""
    name: str = ""
    owner: PlaylistOwner | None = None
    tracks: PlaylistTracks | None = None
    images: list[Image] = Field(default_factory=list)
    external_urls: ExternalUrls = Field(default_factory=ExternalUrls)

    @property
    def owner_name(self) -> str:
        return (self.owner.display_name if self.owner else None) or ""

    @property
    def track_count(self) -> int:
        return self.tracks.total if self.tracks else 0


class Paging(_Snapshot, Generic[T]):
    """One category of search results."""

    items: list[T] = Field(default_factory=list)
    total: int = 0


class SearchResponse(_Snapshot):
    """Search results by category.

    A category is ``None`` when it was not requested or its request failed,
    which is different from a page with no items.
    """

    artists: Paging[Artist] | None = None
    tracks: Paging[Track] | None = None
    playlists: Paging[Playlist] | None = None

    @field_validator("playlists", mode="before")
    @classmethod
    def _drop_null_playlists(cls, value: Any) -> Any:
        """Search results can hold null playlist entries; skip them."""
        if isinstance(value, dict) and isinstance(value.get("items"), list):
            value = {**value, "items": [item for item in value["items"] if isinstance(item, dict)]}
        return value

    @property
    def total(self) -> int:
        return sum(page.total for page in (self.artists, self.tracks, self.playlists) if page)

    @property
    def is_empty(self) -> bool:
        return self.artists is None and self.tracks is None and self.playlists is None


class ChartResponse(_Snapshot):
    """A chart snapshot."""

    tracks: list[Track]
    snapshot_id: str = ""
    last_updated: str = ""
    total: int = 0


class TopArtistsResponse(_Snapshot):
    artists: list[Artist]


class TopTracksResponse(_Snapshot):
    tracks: list[Track]


class TopGenresResponse(_Snapshot):
    genres: list[Genre]


class KPIStats(_Snapshot):
    """Headline numbers for the overview page."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    last_snapshot_date: str = Field(alias="lastSnapshotDate")
    total_tracks: int = Field(alias="totalTracks", ge=0)
    total_artists: int = Field(alias="totalArtists", ge=0)
    total_genres: int = Field(alias="totalGenres", ge=0)


class GenreMarketShare(_Snapshot):
    name: str
    markets: dict[str, float] = Field(default_factory=dict)

    def share(self, market: str) -> float:
        return self.markets.get(market, 0.0)


class GenreComparison(_Snapshot):
    """Genre share broken down by market."""

    genres: list[GenreMarketShare] = Field(default_factory=list)

    def for_markets(self, markets: list[str]) -> list[GenreMarketShare]:
        """Rows restricted to ``markets``, with missing markets filled with 0."""
        return [
            GenreMarketShare(name=g.name, markets={m: g.share(m) for m in markets})
            for g in self.genres
        ]
