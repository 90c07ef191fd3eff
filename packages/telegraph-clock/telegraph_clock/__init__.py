"""telegraph-clock - Playback and scrubbing for telegraph documents."""
from __future__ import annotations

from telegraph_clock.frames import FrameHandle, FrameSource, ManualFrames, RealtimeFrames
from telegraph_clock.scrubber import Scrubber

__all__ = ["FrameHandle", "FrameSource", "ManualFrames", "RealtimeFrames", "Scrubber"]
