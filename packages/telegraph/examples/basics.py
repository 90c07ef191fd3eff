"""Scrubbing basics -- firing boss actions by moving the clock.

Demonstrates:
- Creating an editor with the starter scene
- Scrubbing forward to fire scheduled actions
- Scrubbing backward, which rewinds and replays the timeline
- Reading the visible AoEs from a render frame

Run: python -m examples.basics
"""

from telegraph.types import Vec2
from telegraph_editor import Editor


def show(editor: Editor) -> None:
    frame = editor.frame()
    fired = sum(1 for a in editor.document.actions if a.executed)
    print(f"  t={frame.time_ms:>6.0f}ms  |  fired={fired}  |  visible aoes={len(frame.aoes)}")
    for aoe in frame.aoes:
        origin = "action " + aoe.source_action_id if aoe.derived else "authored"
        print(
            f"      {aoe.shape:<10} at ({aoe.position.x:.0f}, {aoe.position.y:.0f})"
            f"  [{origin}]"
        )


def main() -> None:
    print("=== Scrubbing Basics ===\n")

    editor = Editor()

    # An authored AoE appears at the current time and lasts four seconds.
    editor.place_aoe("ring", Vec2(-60, 40))

    for t in (0, 2500, 7000, 1000):
        editor.scrub(t)
        show(editor)

    print("\nDone.")


if __name__ == "__main__":
    main()
