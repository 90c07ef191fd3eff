"""Tests for frame sources."""
from __future__ import annotations

import pytest
from telegraph_clock.frames import FrameHandle, ManualFrames, RealtimeFrames


class TestFrameHandle:
    def test_cancel(self) -> None:
        handle = FrameHandle()
        assert not handle.cancelled
        handle.cancel()
        assert handle.cancelled


class TestManualFrames:
    def test_step_advances_clock_and_runs_callback(self) -> None:
        frames = ManualFrames(start_ms=100)
        seen: list[float] = []
        frames.request(seen.append)
        assert frames.step(16) == 1
        assert seen == [116]
        assert frames.now() == 116

    def test_callbacks_run_once(self) -> None:
        frames = ManualFrames()
        seen: list[float] = []
        frames.request(seen.append)
        frames.step()
        frames.step()
        assert len(seen) == 1
        assert frames.pending() == 0

    def test_cancelled_callback_skipped(self) -> None:
        frames = ManualFrames()
        seen: list[float] = []
        handle = frames.request(seen.append)
        handle.cancel()
        assert frames.pending() == 0
        assert frames.step() == 0
        assert seen == []

    def test_requests_during_frame_wait_for_next(self) -> None:
        frames = ManualFrames()
        seen: list[float] = []

        def chain(now: float) -> None:
            seen.append(now)
            frames.request(chain)

        frames.request(chain)
        frames.run(3, dt_ms=10)
        assert seen == [10, 20, 30]
        assert frames.pending() == 1

    def test_cancel_within_same_frame(self) -> None:
        frames = ManualFrames()
        seen: list[str] = []
        later: list[FrameHandle] = []

        def first(now: float) -> None:
            seen.append("first")
            later[0].cancel()

        frames.request(first)
        later.append(frames.request(lambda now: seen.append("second")))
        frames.step()
        assert seen == ["first"]


class TestRealtimeFrames:
    def test_invalid_fps(self) -> None:
        with pytest.raises(ValueError):
            RealtimeFrames(fps=0)

    def test_run_until_idle(self) -> None:
        frames = RealtimeFrames(fps=1000)
        seen: list[float] = []

        def chain(now: float) -> None:
            seen.append(now)
            if len(seen) < 3:
                frames.request(chain)

        frames.request(chain)
        assert frames.run() == 3
        assert seen == sorted(seen)

    def test_max_frames(self) -> None:
        frames = RealtimeFrames(fps=1000)

        def forever(now: float) -> None:
            frames.request(forever)

        frames.request(forever)
        assert frames.run(max_frames=2) == 2
