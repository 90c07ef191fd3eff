"""Frame sources - cancellable per-frame callback scheduling."""
from __future__ import annotations

import time
from typing import Callable, Protocol

FrameCallback = Callable[[float], None]


class FrameHandle:
    """Token for one requested frame. Cancelling it drops the callback."""

    __slots__ = ("_cancelled",)

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class FrameSource(Protocol):
    def now(self) -> float:
        """Current frame clock in milliseconds."""
        ...

    def request(self, callback: FrameCallback) -> FrameHandle:
        """Run ``callback(now_ms)`` once on the next frame."""
        ...


class ManualFrames:
    """Deterministic frame source driven by explicit :meth:`step` calls."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self._now = start_ms
        self._pending: list[tuple[FrameHandle, FrameCallback]] = []

    def now(self) -> float:
        return self._now

    def request(self, callback: FrameCallback) -> FrameHandle:
        handle = FrameHandle()
        self._pending.append((handle, callback))
        return handle

    def pending(self) -> int:
        return sum(1 for handle, _ in self._pending if not handle.cancelled)

    def step(self, dt_ms: float = 16.0) -> int:
        """Advance the clock and run the callbacks requested before this frame.

        Callbacks requested while the frame runs wait for the next step.
        Returns the number of callbacks run.
        """
        self._now += dt_ms
        due, self._pending = self._pending, []
        ran = 0
        for handle, callback in due:
            if handle.cancelled:
                continue
            callback(self._now)
            ran += 1
        return ran

    def run(self, frames: int, dt_ms: float = 16.0) -> None:
        for _ in range(frames):
            self.step(dt_ms)


class RealtimeFrames:
    """Wall-clock frame source paced at a fixed frame rate."""

    def __init__(self, fps: int = 60) -> None:
        if fps <= 0:
            raise ValueError("fps must be positive")
        self._fps = fps
        self._frame_s = 1.0 / fps
        self._pending: list[tuple[FrameHandle, FrameCallback]] = []

    @property
    def fps(self) -> int:
        return self._fps

    def now(self) -> float:
        return time.monotonic() * 1000.0

    def request(self, callback: FrameCallback) -> FrameHandle:
        handle = FrameHandle()
        self._pending.append((handle, callback))
        return handle

    def run(self, max_frames: int | None = None) -> int:
        """Pump frames until nothing is pending or ``max_frames`` ran."""
        frames = 0
        while self._pending and (max_frames is None or frames < max_frames):
            start = time.monotonic()
            due, self._pending = self._pending, []
            for handle, callback in due:
                if handle.cancelled:
                    continue
                callback(self.now())
            frames += 1
            sleep_time = self._frame_s - (time.monotonic() - start)
            if sleep_time > 0:
                time.sleep(sleep_time)
        return frames
