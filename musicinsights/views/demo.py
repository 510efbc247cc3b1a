"""Bundled demo datasets shown when ``DASHBOARD_DEMO_FALLBACK`` is enabled."""

from datetime import UTC, datetime

from musicinsights.api.models import Artist, GenreComparison, KPIStats


def demo_kpi() -> KPIStats:
    return KPIStats(
        last_snapshot_date=datetime.now(UTC).isoformat(),
        total_tracks=12453,
        total_artists=3241,
        total_genres=156,
    )


def _artist(id: str, name: str, followers: int, popularity: int, genres: list[str]) -> Artist:
    return Artist.model_validate(
        {
            "id": id,
            "name": name,
            "images": [{"url": "/placeholder.svg", "height": 640, "width": 640}],
            "followers": {"total": followers},
            "popularity": popularity,
            "external_urls": {"spotify": "#"},
            "genres": genres,
        }
    )


DEMO_ARTISTS: list[Artist] = [
    _artist("demo-1", "Arijit Singh", 15_000_000, 95, ["Bollywood", "Playback Singing"]),
    _artist("demo-2", "A.R. Rahman", 8_500_000, 92, ["Film Score", "World Music"]),
    _artist("demo-3", "Shreya Ghoshal", 12_000_000, 90, ["Bollywood", "Classical"]),
    _artist("demo-4", "Badshah", 9_800_000, 88, ["Hip-Hop", "Punjabi"]),
    _artist("demo-5", "Armaan Malik", 7_200_000, 85, ["Pop", "Bollywood"]),
    _artist("demo-6", "Rahat Fateh Ali Khan", 6_500_000, 82, ["Qawwali", "Sufi"]),
]

DEMO_GENRE_COMPARISON = GenreComparison.model_validate(
    {
        "genres": [
            {"name": "Pop", "markets": {"IN": 35, "US": 42, "GB": 38, "CA": 40, "AU": 36}},
            {"name": "Hip-Hop", "markets": {"IN": 20, "US": 35, "GB": 25, "CA": 30, "AU": 22}},
            {"name": "Bollywood", "markets": {"IN": 45, "US": 5, "GB": 8, "CA": 6, "AU": 7}},
            {"name": "Rock", "markets": {"IN": 15, "US": 25, "GB": 30, "CA": 28, "AU": 32}},
            {"name": "Electronic", "markets": {"IN": 12, "US": 18, "GB": 22, "CA": 20, "AU": 25}},
            {"name": "Classical", "markets": {"IN": 25, "US": 8, "GB": 12, "CA": 10, "AU": 9}},
        ]
    }
)
