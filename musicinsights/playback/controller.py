"""Single-preview playback control shared by track lists."""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import partial

from musicinsights.api.models import Track
from musicinsights.playback.player import FfplayPlayer, PreviewPlayer

logger = logging.getLogger(__name__)

PlayerFactory = Callable[[str], PreviewPlayer]


class PreviewController:
    """Plays at most one track preview at a time.

    Players are created on a track's first play and kept until
    :meth:`close`, so replaying a track resumes the same player.
    """

    def __init__(self, player_factory: PlayerFactory | None = None):
        self._factory: PlayerFactory = player_factory or FfplayPlayer
        self._players: dict[str, PreviewPlayer] = {}
        self.currently_playing: str | None = None

    def is_playing(self, track_id: str) -> bool:
        return self.currently_playing == track_id

    def player_for(self, track_id: str) -> PreviewPlayer | None:
        return self._players.get(track_id)

    def toggle(self, track: Track) -> bool:
        """Play or pause ``track``'s preview.

        Returns True if the track is playing afterwards. Tracks without a
        preview URL are ignored.
        """
        if not track.preview_url:
            return False

        if self.currently_playing == track.id:
            self._players[track.id].pause()
            self.currently_playing = None
            return False

        # Never two previews audible at once
        if self.currently_playing is not None:
            self._players[self.currently_playing].pause()
            self.currently_playing = None

        player = self._players.get(track.id)
        if player is None:
            player = self._factory(track.preview_url)
            player.on_complete(partial(self._on_complete, track.id))
            self._players[track.id] = player

        player.play()
        self.currently_playing = track.id
        logger.debug("Playing preview for %s", track)
        return True

    def close(self) -> None:
        """Stop and release every player."""
        for player in self._players.values():
            player.stop()
        self._players.clear()
        self.currently_playing = None

    def _on_complete(self, track_id: str) -> None:
        if self.currently_playing == track_id:
            self.currently_playing = None
