"""Analytics API integration module."""

from musicinsights.api.client import (
    AnalyticsAPIError,
    AnalyticsClient,
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    EndpointNotFoundError,
    ResponseValidationError,
)
from musicinsights.api.models import Artist, Genre, SearchResponse, Track

__all__ = [
    "AnalyticsAPIError",
    "AnalyticsClient",
    "APIConnectionError",
    "APIStatusError",
    "APITimeoutError",
    "Artist",
    "EndpointNotFoundError",
    "Genre",
    "ResponseValidationError",
    "SearchResponse",
    "Track",
]
