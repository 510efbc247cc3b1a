"""Tests for the debounce timer."""

import asyncio

import pytest

from musicinsights.search.debounce import DebounceTimer


class Recorder:
    def __init__(self) -> None:
        self.calls: list[str] = []

    async def __call__(self, value: str) -> None:
        self.calls.append(value)


class TestDebounceTimer:
    """Tests for DebounceTimer."""

    @pytest.mark.asyncio
    async def test_only_last_call_of_burst_runs(self) -> None:
        """Rescheduling should replace the pending call."""
        timer = DebounceTimer(0.05)
        recorder = Recorder()

        for value in ("a", "ab", "abc"):
            timer.schedule(recorder, value)
            await asyncio.sleep(0.01)
        await timer.wait()

        assert recorder.calls == ["abc"]

    @pytest.mark.asyncio
    async def test_no_leading_edge_call(self) -> None:
        """Nothing should run before the delay has passed."""
        timer = DebounceTimer(0.05)
        recorder = Recorder()

        timer.schedule(recorder, "x")
        await asyncio.sleep(0)

        assert recorder.calls == []
        assert timer.pending
        await timer.wait()
        assert recorder.calls == ["x"]
        assert not timer.pending

    @pytest.mark.asyncio
    async def test_cancel_discards_pending_call(self) -> None:
        """A cancelled call should never run."""
        timer = DebounceTimer(0.02)
        recorder = Recorder()

        timer.schedule(recorder, "x")
        assert timer.cancel() is True
        await asyncio.sleep(0.05)

        assert recorder.calls == []
        assert timer.cancel() is False

    @pytest.mark.asyncio
    async def test_cancel_does_not_abort_fired_call(self) -> None:
        """Once fired, a call runs to completion even if cancel() is called."""
        timer = DebounceTimer(0)
        release = asyncio.Event()
        finished: list[bool] = []

        async def slow() -> None:
            await release.wait()
            finished.append(True)

        timer.schedule(slow)
        await asyncio.sleep(0.01)
        assert timer.busy and not timer.pending

        timer.cancel()
        release.set()
        await timer.wait()

        assert finished == [True]

    @pytest.mark.asyncio
    async def test_failing_call_does_not_propagate(self) -> None:
        """Errors in a fired call are logged, not raised from wait()."""
        timer = DebounceTimer(0)

        async def boom() -> None:
            raise RuntimeError("boom")

        timer.schedule(boom)
        await timer.wait()

        assert not timer.busy
