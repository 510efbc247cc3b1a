"""Audio preview playback module."""

from musicinsights.playback.controller import PreviewController
from musicinsights.playback.player import (
    FfplayPlayer,
    PlaybackError,
    PlaybackUnavailableError,
    PreviewPlayer,
)

__all__ = [
    "FfplayPlayer",
    "PlaybackError",
    "PlaybackUnavailableError",
    "PreviewController",
    "PreviewPlayer",
]
