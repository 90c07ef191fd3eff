"""Scrubber - playback loop and manual time travel for a document store."""
from __future__ import annotations

from loguru import logger

from telegraph.document import set_playing
from telegraph.store import DocumentStore
from telegraph.types import Document
from telegraph_clock.frames import FrameHandle, FrameSource
from telegraph_schedule.scheduler import TimeValue, reset_simulation, scrub


class Scrubber:
    """Two-state clock (paused/playing) over a :class:`DocumentStore`.

    While playing, one frame callback is pending at a time. Each frame
    advances the clock by the wall-clock delta since the previous frame and
    is fully committed before the next frame is requested. Pausing cancels
    the pending frame and bumps the loop generation, so a callback that
    slipped through from an earlier loop does nothing.
    """

    def __init__(
        self,
        store: DocumentStore,
        frames: FrameSource,
        auto_pause_at_end: bool = False,
    ) -> None:
        self._store = store
        self._frames = frames
        self._auto_pause_at_end = auto_pause_at_end
        self._handle: FrameHandle | None = None
        self._playing = False
        self._generation = 0
        self._last_ms = 0.0

    @property
    def playing(self) -> bool:
        return self._playing

    @property
    def time_ms(self) -> float:
        return self._store.state.simulation_time_ms

    @property
    def generation(self) -> int:
        return self._generation

    def play(self) -> None:
        if self._playing:
            return
        self._playing = True
        self._generation += 1
        generation = self._generation
        self._last_ms = self._frames.now()
        self._store.dispatch(set_playing, True)
        if generation != self._generation:
            return
        logger.debug(f"Playback started at {self.time_ms}ms")
        self._request(generation)

    def pause(self) -> None:
        self._cancel()
        if self._store.state.playing:
            self._store.dispatch(set_playing, False)
            logger.debug(f"Playback paused at {self.time_ms}ms")

    def toggle(self) -> None:
        if self.playing:
            self.pause()
        else:
            self.play()

    def scrub(self, value: TimeValue) -> Document:
        """Set the clock to an absolute time or ``fn(previous)``; always reconciles."""
        return self._store.dispatch(scrub, value)

    def reset(self) -> Document:
        self._cancel()
        return self._store.dispatch(reset_simulation)

    def stop(self) -> None:
        """Cancel the frame loop without touching the document."""
        self._cancel()

    def _request(self, generation: int) -> None:
        def on_frame(now_ms: float) -> None:
            self._tick(generation, now_ms)

        self._handle = self._frames.request(on_frame)

    def _tick(self, generation: int, now_ms: float) -> None:
        if generation != self._generation:
            return
        self._handle = None
        delta = now_ms - self._last_ms
        self._last_ms = now_ms
        document = self.scrub(lambda previous: previous + delta)
        if generation != self._generation:
            # a listener paused or restarted the loop during the commit
            return
        if (
            self._auto_pause_at_end
            and document.simulation_time_ms >= document.timeline_duration_ms
        ):
            self.pause()
            return
        self._request(generation)

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._playing = False
        self._generation += 1
