"""Real-time playback -- a moving boss casting along its path.

Demonstrates:
- Giving the boss a looping keyframe path
- Playing the timeline against a wall-clock frame source
- Auto-pausing when the timeline ends
- Exporting the authored scene as JSON

Run: python -m examples.playback
"""

from telegraph.config import EditorConfig
from telegraph.types import Keyframe, PathMotion
from telegraph_clock import RealtimeFrames
from telegraph_editor import Editor


def main() -> None:
    print("=== Real-time Playback ===\n")

    frames = RealtimeFrames(fps=30)
    editor = Editor(
        EditorConfig(timeline_duration_ms=8000, auto_pause_at_end=True),
        frames=frames,
    )

    boss = next(e for e in editor.document.entities if e.type == "boss")
    editor.set_motion(
        boss.id,
        PathMotion(
            points=(Keyframe(0, 0, 0), Keyframe(150, 0, 2000), Keyframe(0, 150, 4000)),
            loop=True,
        ),
    )

    def report(previous, current) -> None:
        for before, after in zip(previous.actions, current.actions):
            if after.executed and not before.executed:
                print(f"  {current.simulation_time_ms:>6.0f}ms  action {after.id} cast")

    editor.subscribe(report)
    editor.play()
    ran = frames.run()

    print(f"\nStopped after {ran} frames at {editor.document.simulation_time_ms:.0f}ms.")
    print(editor.export_json())


if __name__ == "__main__":
    main()
