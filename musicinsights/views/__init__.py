"""Dashboard pages."""

from musicinsights.views.artists import ArtistDetailPage, ArtistsPage
from musicinsights.views.base import MARKETS, Page, Section
from musicinsights.views.compare import ComparePage
from musicinsights.views.overview import OverviewPage
from musicinsights.views.search import SearchPage
from musicinsights.views.year_explorer import YearExplorerPage, YearTab

__all__ = [
    "ArtistDetailPage",
    "ArtistsPage",
    "ComparePage",
    "MARKETS",
    "OverviewPage",
    "Page",
    "SearchPage",
    "Section",
    "YearExplorerPage",
    "YearTab",
]
