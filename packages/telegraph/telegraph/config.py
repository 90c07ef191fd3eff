"""Editor configuration dataclass."""
from __future__ import annotations

from dataclasses import dataclass

KEYFRAME_TOLERANCE_MS = 250.0
DUPLICATE_OFFSET = 20.0
TIMELINE_DURATION_MS = 120000.0
ACTION_LEAD_MS = 2000.0
AOE_DURATION_MS = 4000.0
ACTION_DURATION_MS = 3000.0


@dataclass(frozen=True)
class EditorConfig:
    """Immutable configuration for an editing session.

    Attributes:
        timeline_duration_ms: Length of the timeline for new documents.
        keyframe_tolerance_ms: Window around the current time in which a
            drag edits an existing keyframe instead of adding one.
        duplicate_offset: Positional offset applied to duplicates on both axes.
        action_lead_ms: New actions are scheduled this far after the current time.
        aoe_duration_ms: Visible duration of newly placed AoEs.
        action_duration_ms: Visible duration of AoEs spawned by new actions.
        auto_pause_at_end: Stop playback when the clock reaches the end.
        id_prefix: Prefix for generated ids.
    """

    timeline_duration_ms: float = TIMELINE_DURATION_MS
    keyframe_tolerance_ms: float = KEYFRAME_TOLERANCE_MS
    duplicate_offset: float = DUPLICATE_OFFSET
    action_lead_ms: float = ACTION_LEAD_MS
    aoe_duration_ms: float = AOE_DURATION_MS
    action_duration_ms: float = ACTION_DURATION_MS
    auto_pause_at_end: bool = False
    id_prefix: str = "id"
