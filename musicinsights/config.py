"""Configuration management using pydantic-settings."""

from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file from current directory or project root
_env_file = Path.cwd() / ".env"
if _env_file.exists():
    load_dotenv(_env_file)


class ApiConfig(BaseSettings):
    """Analytics API configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    base_url: str = Field(
        default="https://api.musicinsights.in",
        description="Analytics API host, without the version path",
    )
    version: str = Field(default="v1", description="API version path segment")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")

    @property
    def root_url(self) -> str:
        """Base URL including the version segment."""
        return f"{self.base_url.rstrip('/')}/{self.version}"


class SearchConfig(BaseSettings):
    """Search behavior configuration."""

    model_config = SettingsConfigDict(env_prefix="SEARCH_")

    debounce_seconds: float = Field(
        default=0.5,
        ge=0,
        description="Quiet period before a typed query is sent",
    )
    artist_limit: int = Field(default=10, ge=1, le=50)
    track_limit: int = Field(default=20, ge=1, le=50)
    playlist_limit: int = Field(default=10, ge=1, le=50)


class DashboardConfig(BaseSettings):
    """Dashboard page configuration."""

    model_config = SettingsConfigDict(env_prefix="DASHBOARD_")

    market: str = Field(default="IN", min_length=2, max_length=2, description="Default market")
    demo_fallback: bool = Field(
        default=False,
        description="Show bundled demo data when a page fails to load",
    )
    require_login: bool = Field(default=True, description="Require a session for dashboard pages")
    top_tracks: int = Field(default=50, ge=1, description="Tracks shown on the overview page")


class AppConfig(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api: ApiConfig = Field(default_factory=ApiConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)

    verbose: bool = Field(default=False)
    session_file: Path = Field(default=Path.home() / ".musicinsights" / "session.json")


def load_config() -> AppConfig:
    """Load configuration from environment and .env file."""
    return AppConfig(
        api=ApiConfig(),
        search=SearchConfig(),
        dashboard=DashboardConfig(),
    )
