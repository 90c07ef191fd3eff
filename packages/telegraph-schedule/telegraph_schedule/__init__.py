"""telegraph-schedule - Boss action firing and time travel for telegraph documents."""
from __future__ import annotations

from telegraph_schedule.scheduler import (
    boss_position,
    derived_aoe_id,
    find_boss,
    reconcile,
    refire,
    reset_simulation,
    rewind,
    scrub,
    set_timeline_duration,
    spawn_aoe,
)

__all__ = [
    "boss_position",
    "derived_aoe_id",
    "find_boss",
    "reconcile",
    "refire",
    "reset_simulation",
    "rewind",
    "scrub",
    "set_timeline_duration",
    "spawn_aoe",
]
