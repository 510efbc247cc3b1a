"""Tests for the debounced search aggregator."""

import asyncio

import httpx
import pytest

from conftest import FakeSearchClient, mock_client, track_payload
from musicinsights.api.models import SearchResponse
from musicinsights.config import SearchConfig
from musicinsights.search.aggregator import SearchAggregator


@pytest.fixture
def client() -> FakeSearchClient:
    return FakeSearchClient()


@pytest.fixture
def aggregator(client: FakeSearchClient) -> SearchAggregator:
    return SearchAggregator(client, SearchConfig(debounce_seconds=0.05))


class TestDebounce:
    """Tests for keystroke debouncing."""

    @pytest.mark.asyncio
    async def test_typing_burst_fires_once_with_final_text(self, client: FakeSearchClient) -> None:
        """Typing faster than the window should search only the final text, once."""
        window = 0.2
        aggregator = SearchAggregator(client, SearchConfig(debounce_seconds=window))
        loop = asyncio.get_running_loop()

        text = ""
        for letter in "Rahman":
            text += letter
            aggregator.submit(text)
            last_keystroke = loop.time()
            await asyncio.sleep(window / 10)
        await aggregator.wait()

        # One request per category, all for the final text
        assert client.queries == ["Rahman", "Rahman", "Rahman"]
        assert min(client.call_times) - last_keystroke >= window - 0.01

    @pytest.mark.asyncio
    async def test_category_limits(self, aggregator: SearchAggregator, client: FakeSearchClient) -> None:
        """Should query artists, tracks and playlists with limits 10, 20, 10."""
        aggregator.submit("arijit")
        await aggregator.wait()

        assert sorted(client.calls) == sorted(
            [("arijit", "artist", 10), ("arijit", "track", 20), ("arijit", "playlist", 10)]
        )

    @pytest.mark.asyncio
    async def test_query_is_trimmed(self, aggregator: SearchAggregator, client: FakeSearchClient) -> None:
        """Surrounding whitespace should not be sent."""
        await aggregator.run("  rahman  ")

        assert set(client.queries) == {"rahman"}

    @pytest.mark.asyncio
    async def test_pending_search_is_discarded_by_clear(
        self, aggregator: SearchAggregator, client: FakeSearchClient
    ) -> None:
        """Clearing before the window elapses should cancel the search."""
        aggregator.submit("arijit")
        assert aggregator.pending
        aggregator.clear()
        await asyncio.sleep(0.1)

        assert client.calls == []
        assert aggregator.results.is_empty


class TestEmptyQuery:
    """Tests for blank input."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\t\n"])
    async def test_blank_query_clears_without_requests(
        self, aggregator: SearchAggregator, client: FakeSearchClient, text: str
    ) -> None:
        """Blank input should empty the results and make no request."""
        await aggregator.run("arijit")
        assert aggregator.results.tracks is not None
        client.calls.clear()

        aggregator.submit(text)
        await aggregator.wait()

        assert client.calls == []
        assert aggregator.results.is_empty
        assert not aggregator.loading


class TestFaultIsolation:
    """Tests for per-category failures."""

    @pytest.mark.asyncio
    async def test_failed_category_is_absent(
        self, aggregator: SearchAggregator, client: FakeSearchClient
    ) -> None:
        """A failing category should be None while the others are populated."""
        client.failures = {"artist"}

        results = await aggregator.run("arijit")

        assert results is not None
        assert results.artists is None
        assert results.tracks is not None and len(results.tracks.items) == 1
        assert results.playlists is not None and len(results.playlists.items) == 1

    @pytest.mark.asyncio
    async def test_all_categories_failing(
        self, aggregator: SearchAggregator, client: FakeSearchClient
    ) -> None:
        """Every category failing should leave every category absent."""
        client.failures = {"artist", "track", "playlist"}

        results = await aggregator.run("arijit")

        assert results is not None
        assert results.is_empty

    @pytest.mark.asyncio
    async def test_artist_http_failure_keeps_five_tracks(self) -> None:
        """Artist search returning 500 should not hide the five track results."""

        def handler(request: httpx.Request) -> httpx.Response:
            search_type = request.url.params["type"]
            if search_type == "artist":
                return httpx.Response(500, json={"detail": "boom"})
            if search_type == "track":
                items = [track_payload(id=f"t{i}") for i in range(5)]
                return httpx.Response(200, json={"tracks": {"items": items, "total": 5}})
            return httpx.Response(200, json={"playlists": {"items": [], "total": 0}})

        async with mock_client(handler) as client:
            aggregator = SearchAggregator(client, SearchConfig(debounce_seconds=0))
            results = await aggregator.run("Rahman")

        assert results is not None
        assert results.artists is None
        assert results.tracks is not None and len(results.tracks.items) == 5
        assert results.playlists is not None and results.playlists.items == []

    @pytest.mark.asyncio
    async def test_undecodable_artist_body_keeps_other_categories(self) -> None:
        """A garbled artist response should only knock out artists."""

        def handler(request: httpx.Request) -> httpx.Response:
            search_type = request.url.params["type"]
            if search_type == "artist":
                return httpx.Response(
                    200, headers={"Content-Encoding": "gzip"}, content=b"not gzip"
                )
            if search_type == "track":
                items = [track_payload(id=f"t{i}") for i in range(5)]
                return httpx.Response(200, json={"tracks": {"items": items, "total": 5}})
            return httpx.Response(200, json={"playlists": {"items": [], "total": 0}})

        async with mock_client(handler) as client:
            aggregator = SearchAggregator(client, SearchConfig(debounce_seconds=0))
            results = await aggregator.run("Rahman")

        assert results is not None
        assert results.artists is None
        assert results.tracks is not None and len(results.tracks.items) == 5
        assert not aggregator.loading

    @pytest.mark.asyncio
    async def test_null_playlist_items_keep_category(self) -> None:
        """Null playlist entries should not mark the playlist category as failed."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params["type"] == "playlist":
                items = [None, {"id": "p1", "name": "Rahman Essentials"}]
                return httpx.Response(200, json={"playlists": {"items": items, "total": 2}})
            return httpx.Response(200, json={})

        async with mock_client(handler) as client:
            aggregator = SearchAggregator(client, SearchConfig(debounce_seconds=0))
            results = await aggregator.run("Rahman")

        assert results.playlists is not None
        assert [p.name for p in results.playlists.items] == ["Rahman Essentials"]


class TestStaleResponses:
    """Tests for out-of-order completion."""

    @pytest.mark.asyncio
    async def test_older_query_finishing_last_is_discarded(
        self, aggregator: SearchAggregator, client: FakeSearchClient
    ) -> None:
        """Results of A arriving after B should not overwrite B."""
        client.gates["A"] = asyncio.Event()

        task_a = asyncio.create_task(aggregator.run("A"))
        await asyncio.sleep(0)
        results_b = await aggregator.run("B")
        client.gates["A"].set()
        results_a = await task_a

        assert results_a is None
        assert results_b is not None
        assert aggregator.results is results_b
        assert aggregator.results.tracks.items[0].name == "B"

    @pytest.mark.asyncio
    async def test_older_query_finishing_first_is_discarded(
        self, aggregator: SearchAggregator, client: FakeSearchClient
    ) -> None:
        """Results of A arriving before B (but after B was issued) are dropped too."""
        client.gates["A"] = asyncio.Event()
        client.gates["B"] = asyncio.Event()
        published: list[SearchResponse] = []
        aggregator.add_listener(published.append)

        task_a = asyncio.create_task(aggregator.run("A"))
        await asyncio.sleep(0)
        task_b = asyncio.create_task(aggregator.run("B"))
        await asyncio.sleep(0)

        client.gates["A"].set()
        assert await task_a is None
        assert published == []

        client.gates["B"].set()
        await task_b

        assert len(published) == 1
        assert published[0].tracks.items[0].name == "B"

    @pytest.mark.asyncio
    async def test_clear_discards_in_flight_results(
        self, aggregator: SearchAggregator, client: FakeSearchClient
    ) -> None:
        """A clear issued while a search is in flight should win."""
        client.gates["A"] = asyncio.Event()

        task = asyncio.create_task(aggregator.run("A"))
        await asyncio.sleep(0)
        aggregator.clear()
        client.gates["A"].set()

        assert await task is None
        assert aggregator.results.is_empty


class TestListeners:
    """Tests for result listeners."""

    @pytest.mark.asyncio
    async def test_listener_receives_results_until_unsubscribed(
        self, aggregator: SearchAggregator
    ) -> None:
        """Listeners get each accepted result until they unsubscribe."""
        published: list[SearchResponse] = []
        unsubscribe = aggregator.add_listener(published.append)

        await aggregator.run("arijit")
        unsubscribe()
        await aggregator.run("shreya")

        assert len(published) == 1
        assert published[0].artists.items[0].name == "arijit"

    @pytest.mark.asyncio
    async def test_loading_flag(self, aggregator: SearchAggregator, client: FakeSearchClient) -> None:
        """loading should be set while a search is in flight."""
        client.gates["A"] = asyncio.Event()

        task = asyncio.create_task(aggregator.run("A"))
        await asyncio.sleep(0)
        assert aggregator.loading

        client.gates["A"].set()
        await task
        assert not aggregator.loading
