"""Music analytics REST API client."""

import logging
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from musicinsights.api.models import (
    Artist,
    ChartResponse,
    GenreComparison,
    KPIStats,
    SearchResponse,
    SearchType,
    TopArtistsResponse,
    TopGenresResponse,
    TopTracksResponse,
)
from musicinsights.config import ApiConfig

logger = logging.getLogger(__name__)

DEFAULT_MARKET = "IN"
DEFAULT_COMPARE_MARKETS = ("IN", "US", "GB")

M = TypeVar("M", bound=BaseModel)


class AnalyticsAPIError(Exception):
    """Base exception for analytics API errors."""

    pass


class APITimeoutError(AnalyticsAPIError):
    """Request did not complete within the configured timeout."""

    pass


class APIConnectionError(AnalyticsAPIError):
    """Request failed at the transport level."""

    pass


class APIStatusError(AnalyticsAPIError):
    """Server answered with a non-2xx status."""

    def __init__(self, status_code: int, url: str):
        self.status_code = status_code
        self.url = url
        super().__init__(f"HTTP {status_code} for {url}")


class EndpointNotFoundError(APIStatusError):
    """Server answered 404."""

    pass


class ResponseValidationError(AnalyticsAPIError):
    """Response body does not match the expected schema."""

    pass


class AnalyticsClient:
    """Async client for the analytics API.

    The underlying ``httpx.AsyncClient`` is created on first use and must be
    released with :meth:`aclose` (or by using the client as an async context
    manager).
    """

    def __init__(
        self,
        config: ApiConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or ApiConfig()
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    @property
    def http(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._http is None:
            self._http = httpx.AsyncClient(
                base_url=self.config.root_url,
                timeout=self.config.timeout,
                headers={"Content-Type": "application/json"},
                follow_redirects=True,
                transport=self._transport,
            )
        return self._http

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def __aenter__(self) -> "AnalyticsClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET ``path`` and return the decoded JSON body."""
        try:
            response = await self.http.get(path, params=params)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.error("Request timeout: %s", path)
            raise APITimeoutError(f"Request to {path} timed out") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            url = str(e.request.url)
            if status >= 500:
                logger.error("Server error: %s", e.response.text)
            elif status == 404:
                logger.error("Endpoint not found: %s", url)
            else:
                logger.error("API error: %s", e)
            if status == 404:
                raise EndpointNotFoundError(status, url) from e
            raise APIStatusError(status, url) from e
        except httpx.RequestError as e:
            # Also undecodable bodies and redirect loops
            logger.error("API error: %s", e)
            raise APIConnectionError(f"Request to {path} failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise ResponseValidationError(f"Response from {path} is not JSON") from e

    async def _get_model(
        self,
        path: str,
        model: type[M],
        params: dict[str, Any] | None = None,
    ) -> M:
        """GET ``path`` and validate the body against ``model``."""
        data = await self._get(path, params)
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.error("Unexpected response format from %s", path)
            raise ResponseValidationError(f"Unexpected API response format for {path}: {e}") from e

    # Charts

    async def get_top_today(self, market: str = DEFAULT_MARKET) -> ChartResponse:
        return await self._get_model("/charts/top-today", ChartResponse, {"market": market})

    async def get_top_year(self, year: int, market: str = DEFAULT_MARKET) -> ChartResponse:
        return await self._get_model(
            "/charts/top-year", ChartResponse, {"year": year, "market": market}
        )

    # Artists

    async def get_top_artists(self, year: int, market: str = DEFAULT_MARKET) -> TopArtistsResponse:
        return await self._get_model(
            "/artists/top", TopArtistsResponse, {"year": year, "market": market}
        )

    async def get_artist_top_tracks(
        self, artist_id: str, market: str = DEFAULT_MARKET
    ) -> TopTracksResponse:
        return await self._get_model(
            f"/artists/{quote(artist_id, safe='')}/top-tracks",
            TopTracksResponse,
            {"market": market},
        )

    async def get_artist(self, artist_id: str) -> Artist:
        return await self._get_model(f"/artists/{quote(artist_id, safe='')}", Artist)

    # Genres

    async def get_top_genres(self, year: int, market: str = DEFAULT_MARKET) -> TopGenresResponse:
        return await self._get_model(
            "/genres/top", TopGenresResponse, {"year": year, "market": market}
        )

    # Search

    async def search(
        self,
        query: str,
        search_type: SearchType = "track",
        limit: int = 20,
    ) -> SearchResponse:
        """Search one category. Only the requested category is populated."""
        return await self._get_model(
            "/search",
            SearchResponse,
            {"q": query, "type": search_type, "limit": limit},
        )

    # Compare

    async def compare_genres(
        self,
        year: int,
        markets: list[str] | tuple[str, ...] = DEFAULT_COMPARE_MARKETS,
    ) -> GenreComparison:
        return await self._get_model(
            "/compare/genres",
            GenreComparison,
            {"year": year, "markets": ",".join(markets)},
        )

    # Analytics

    async def get_kpi_stats(self) -> KPIStats:
        return await self._get_model("/analytics/kpi", KPIStats)
