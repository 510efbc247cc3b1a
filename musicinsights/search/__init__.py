"""Search module."""

from musicinsights.search.aggregator import SearchAggregator
from musicinsights.search.debounce import DebounceTimer

__all__ = ["DebounceTimer", "SearchAggregator"]
