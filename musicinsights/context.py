"""Application context shared by the dashboard pages."""

from rich.console import Console

from musicinsights.api.client import AnalyticsClient
from musicinsights.config import AppConfig, load_config
from musicinsights.playback.controller import PlayerFactory, PreviewController
from musicinsights.search.aggregator import SearchAggregator
from musicinsights.session import SessionError, SessionStore


class AppContext:
    """Owns the config, API client, session and preview controller.

    Use as an async context manager so the HTTP client and any preview
    players are released on exit.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        console: Console | None = None,
        client: AnalyticsClient | None = None,
        player_factory: PlayerFactory | None = None,
    ):
        self.config = config or load_config()
        self.console = console or Console()
        self.session = SessionStore(self.config.session_file)
        self.previews = PreviewController(player_factory)
        self._client = client

    @property
    def client(self) -> AnalyticsClient:
        """Lazy-load API client."""
        if self._client is None:
            self._client = AnalyticsClient(self.config.api)
        return self._client

    def new_search(self) -> SearchAggregator:
        return SearchAggregator(self.client, self.config.search)

    def require_session(self) -> None:
        if self.config.dashboard.require_login and not self.session.is_authenticated:
            raise SessionError("Not signed in. Run 'musicinsights login' first.")

    def logout(self) -> bool:
        self.previews.close()
        return self.session.logout()

    async def close(self) -> None:
        self.previews.close()
        if self._client is not None:
            await self._client.aclose()

    async def __aenter__(self) -> "AppContext":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
