"""Audio preview players."""

from __future__ import annotations

import asyncio
import logging
import shutil
import signal
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)


class PlaybackError(Exception):
    """Base exception for playback errors."""

    pass


class PlaybackUnavailableError(PlaybackError):
    """No audio backend is installed."""

    pass


class PreviewPlayer(Protocol):
    """Protocol for a playable preview clip bound to one URL.

    ``on_complete`` listeners fire once each time the clip plays through to
    its end. They never fire because of :meth:`pause` or :meth:`stop`.
    """

    def play(self) -> None:
        """Start playback, or resume it if paused."""
        ...

    def pause(self) -> None:
        """Pause playback, keeping the position."""
        ...

    def stop(self) -> None:
        """Stop playback and release the backend."""
        ...

    def on_complete(self, callback: Callable[[], None]) -> None:
        """Register a listener for natural end of playback."""
        ...


def _is_ffplay_available(binary: str = "ffplay") -> bool:
    return shutil.which(binary) is not None


class FfplayPlayer:
    """Preview player backed by an ``ffplay`` subprocess.

    Pausing suspends the process (SIGSTOP) and resuming continues it
    (SIGCONT), so the clip keeps its position. Playing after the clip ended
    starts it again from the beginning. Requires a running event loop and a
    POSIX platform.
    """

    def __init__(self, url: str, binary: str = "ffplay"):
        self.url = url
        self.binary = binary
        self._process: asyncio.subprocess.Process | None = None
        self._task: asyncio.Task[None] | None = None
        self._paused = False
        self._stopping = False
        self._callbacks: list[Callable[[], None]] = []

    @property
    def is_playing(self) -> bool:
        return self._task is not None and not self._task.done() and not self._paused

    def is_available(self) -> bool:
        return _is_ffplay_available(self.binary)

    def on_complete(self, callback: Callable[[], None]) -> None:
        self._callbacks.append(callback)

    def play(self) -> None:
        if self._task is not None and not self._task.done():
            if self._paused:
                self._paused = False
                self._signal(signal.SIGCONT)
            return

        if not self.is_available():
            raise PlaybackUnavailableError(
                f"{self.binary} not found in PATH. Install FFmpeg to play previews."
            )

        self._paused = False
        self._stopping = False
        self._task = asyncio.get_running_loop().create_task(self._run())

    def pause(self) -> None:
        if self._task is None or self._task.done() or self._paused:
            return
        self._paused = True
        self._signal(signal.SIGSTOP)

    def stop(self) -> None:
        if self._task is None or self._task.done():
            return
        self._stopping = True
        if self._process is not None and self._process.returncode is None:
            # A stopped process does not act on SIGTERM until continued
            if self._paused:
                self._process.send_signal(signal.SIGCONT)
            self._process.terminate()
        self._paused = False

    async def _run(self) -> None:
        process = await asyncio.create_subprocess_exec(
            self.binary,
            "-nodisp",
            "-autoexit",
            "-loglevel",
            "quiet",
            self.url,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
        self._process = process

        # pause() or stop() may have been called while the process was starting
        if self._stopping:
            process.terminate()
        elif self._paused:
            process.send_signal(signal.SIGSTOP)

        returncode = await process.wait()
        self._process = None
        self._paused = False

        if returncode == 0 and not self._stopping:
            logger.debug("Preview finished: %s", self.url)
            for callback in list(self._callbacks):
                callback()
        elif returncode not in (0, -signal.SIGTERM):
            logger.warning("%s exited with code %s for %s", self.binary, returncode, self.url)

    def _signal(self, sig: signal.Signals) -> None:
        if self._process is not None and self._process.returncode is None:
            self._process.send_signal(sig)
