"""Test fixtures for musicinsights tests.

This module provides shared fixtures organized into:
- Payload factories: JSON bodies shaped like the analytics API
- Fakes: preview players and a controllable search client
- Context fixtures: config, console and app context wired to fakes
"""

from __future__ import annotations

import asyncio
import io
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
from rich.console import Console

from musicinsights.api.client import AnalyticsClient, APIConnectionError
from musicinsights.api.models import SearchResponse
from musicinsights.config import ApiConfig, AppConfig, DashboardConfig, SearchConfig
from musicinsights.context import AppContext

BASE_URL = "https://api.test"


# =============================================================================
# Payload Factories
# =============================================================================


def track_payload(
    id: str = "t1",
    name: str = "Kesariya",
    preview_url: str | None = "https://cdn.test/preview.mp3",
    popularity: int = 80,
    **overrides: Any,
) -> dict[str, Any]:
    payload = {
        "id": id,
        "name": name,
        "artists": [{"id": "a1", "name": "Arijit Singh"}],
        "album": {
            "id": "al1",
            "name": "Brahmastra",
            "images": [{"url": "https://img.test/1.jpg", "height": 640, "width": 640}],
            "release_date": "2022-07-17",
        },
        "preview_url": preview_url,
        "external_urls": {"spotify": f"https://open.spotify.com/track/{id}"},
        "popularity": popularity,
    }
    payload.update(overrides)
    return payload


def artist_payload(
    id: str = "a1",
    name: str = "Arijit Singh",
    popularity: int = 95,
    genres: list[str] | None = None,
) -> dict[str, Any]:
    return {
        "id": id,
        "name": name,
        "images": [],
        "followers": {"total": 15_000_000},
        "popularity": popularity,
        "external_urls": {"spotify": f"https://open.spotify.com/artist/{id}"},
        "genres": genres if genres is not None else ["bollywood", "filmi"],
    }


def playlist_payload(id: str = "p1", name: str = "Bollywood Hits") -> dict[str, Any]:
    return {
        "id": id,
        "name": name,
        "owner": {"display_name": "Spotify"},
        "tracks": {"total": 50},
        "collaborative": False,
    }


def search_page(search_type: str, query: str, count: int = 1) -> SearchResponse:
    """A one-category search response whose item names carry the query."""
    if search_type == "artist":
        items = [artist_payload(id=f"{query}-{i}", name=query) for i in range(count)]
        return SearchResponse.model_validate({"artists": {"items": items, "total": count}})
    if search_type == "track":
        items = [track_payload(id=f"{query}-{i}", name=query) for i in range(count)]
        return SearchResponse.model_validate({"tracks": {"items": items, "total": count}})
    items = [playlist_payload(id=f"{query}-{i}", name=query) for i in range(count)]
    return SearchResponse.model_validate({"playlists": {"items": items, "total": count}})


# =============================================================================
# Fakes
# =============================================================================


class FakePlayer:
    """Preview player that records calls instead of making sound."""

    def __init__(self, url: str) -> None:
        self.url = url
        self.calls: list[str] = []
        self._callbacks: list[Callable[[], None]] = []

    def play(self) -> None:
        self.calls.append("play")

    def pause(self) -> None:
        self.calls.append("pause")

    def stop(self) -> None:
        self.calls.append("stop")

    def on_complete(self, callback: Callable[[], None]) -> None:
        self._callbacks.append(callback)

    def finish(self) -> None:
        """Simulate the clip playing through to its end."""
        for callback in self._callbacks:
            callback()


class FakeSearchClient:
    """Search client with per-query gates and failures.

    ``gates[query]`` holds a query's responses until the event is set.
    ``failures`` lists search types that raise.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, int]] = []
        self.call_times: list[float] = []
        self.gates: dict[str, asyncio.Event] = {}
        self.failures: set[str] = set()

    async def search(self, query: str, search_type: str = "track", limit: int = 20) -> SearchResponse:
        self.calls.append((query, search_type, limit))
        self.call_times.append(asyncio.get_running_loop().time())
        gate = self.gates.get(query)
        if gate is not None:
            await gate.wait()
        if search_type in self.failures:
            raise APIConnectionError(f"{search_type} search failed")
        return search_page(search_type, query)

    @property
    def queries(self) -> list[str]:
        return [query for query, _, _ in self.calls]


# =============================================================================
# Context Fixtures
# =============================================================================


def mock_client(handler: Callable[[httpx.Request], Any]) -> AnalyticsClient:
    """AnalyticsClient whose requests are answered by ``handler``."""
    return AnalyticsClient(ApiConfig(base_url=BASE_URL), transport=httpx.MockTransport(handler))


@pytest.fixture
def config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        api=ApiConfig(base_url=BASE_URL),
        search=SearchConfig(debounce_seconds=0.05),
        dashboard=DashboardConfig(require_login=False),
        session_file=tmp_path / "session.json",
    )


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture
def players() -> dict[str, FakePlayer]:
    """Fake players created so far, by preview URL."""
    return {}


@pytest.fixture
def player_factory(players: dict[str, FakePlayer]) -> Callable[[str], FakePlayer]:
    def create(url: str) -> FakePlayer:
        player = FakePlayer(url)
        players[url] = player
        return player

    return create


@pytest.fixture
def make_context(
    config: AppConfig,
    console: Console,
    player_factory: Callable[[str], FakePlayer],
) -> Callable[..., AppContext]:
    """Build an AppContext whose API requests go to ``handler``."""

    def build(handler: Callable[[httpx.Request], Any]) -> AppContext:
        return AppContext(
            config=config,
            console=console,
            client=mock_client(handler),
            player_factory=player_factory,
        )

    return build


def output(console: Console) -> str:
    return console.file.getvalue()
