"""Debounced multi-category search."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from musicinsights.api.client import AnalyticsAPIError, AnalyticsClient
from musicinsights.api.models import Paging, SearchResponse, SearchType
from musicinsights.config import SearchConfig
from musicinsights.search.debounce import DebounceTimer

logger = logging.getLogger(__name__)

ResultListener = Callable[[SearchResponse], None]

# Response field populated by each search type
CATEGORY_FIELDS: dict[SearchType, str] = {
    "artist": "artists",
    "track": "tracks",
    "playlist": "playlists",
}


class SearchAggregator:
    """Turns typed text into artist, track and playlist searches.

    Text passed to :meth:`submit` is debounced. When the quiet period ends,
    the three categories are queried concurrently and merged into one
    :class:`SearchResponse`. A failed category is left as ``None`` and does
    not affect the others. Each issued search takes a new generation number;
    results that come back after a newer search (or a clear) was issued are
    dropped.
    """

    def __init__(self, client: AnalyticsClient, config: SearchConfig | None = None):
        self.client = client
        self.config = config or SearchConfig()
        self.query = ""
        self.results = SearchResponse()
        self.loading = False
        self._timer = DebounceTimer(self.config.debounce_seconds)
        self._generation = 0
        self._listeners: list[ResultListener] = []

    @property
    def limits(self) -> dict[SearchType, int]:
        return {
            "artist": self.config.artist_limit,
            "track": self.config.track_limit,
            "playlist": self.config.playlist_limit,
        }

    @property
    def pending(self) -> bool:
        """True while a submitted query is waiting out the debounce window."""
        return self._timer.pending

    def add_listener(self, listener: ResultListener) -> Callable[[], None]:
        """Call ``listener`` with every accepted result. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def submit(self, text: str) -> None:
        """Record a keystroke. The search runs once input stays unchanged long enough."""
        self.query = text
        self._timer.schedule(self.run, text)

    async def run(self, text: str) -> SearchResponse | None:
        """Search immediately.

        Returns the merged response, or None if a newer search superseded
        this one before it finished.
        """
        query = text.strip()
        self._generation += 1
        generation = self._generation

        if not query:
            self.loading = False
            self._publish(SearchResponse())
            return self.results

        self.loading = True
        logger.debug("Searching for %r (generation %d)", query, generation)
        artists, tracks, playlists = await asyncio.gather(
            *(self._search_category(query, t, limit) for t, limit in self.limits.items())
        )

        if generation != self._generation:
            logger.debug("Discarding stale results for %r", query)
            return None

        self.loading = False
        self._publish(SearchResponse(artists=artists, tracks=tracks, playlists=playlists))
        return self.results

    def clear(self) -> None:
        """Drop pending and in-flight searches and empty the results."""
        self._timer.cancel()
        self._generation += 1
        self.query = ""
        self.loading = False
        self._publish(SearchResponse())

    async def wait(self) -> None:
        """Wait for the pending search, if any, and every in-flight search."""
        await self._timer.wait()

    def close(self) -> None:
        self._timer.close()
        self._listeners.clear()

    async def _search_category(
        self,
        query: str,
        search_type: SearchType,
        limit: int,
    ) -> Paging | None:
        try:
            response = await self.client.search(query, search_type, limit)
        except AnalyticsAPIError as e:
            logger.warning("%s search failed for %r: %s", search_type.capitalize(), query, e)
            return None
        return getattr(response, CATEGORY_FIELDS[search_type])

    def _publish(self, results: SearchResponse) -> None:
        self.results = results
        for listener in list(self._listeners):
            listener(results)
