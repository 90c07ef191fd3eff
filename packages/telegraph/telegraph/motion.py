"""Motion model - keyframe paths evaluated at a query instant.

Paths are plain piecewise-linear: between two keyframes each axis is
interpolated independently, before the first keyframe the entity holds the
first position, and past the last one it either holds or, for looping paths,
wraps back into the path span.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Iterable, assert_never

from telegraph.geometry import lerp
from telegraph.types import Keyframe, Motion, NoMotion, PathMotion, Vec2


def sort_points(points: Iterable[Keyframe]) -> tuple[Keyframe, ...]:
    """Stable sort by ``at_ms``; equal times keep their relative order."""
    return tuple(sorted(points, key=lambda p: p.at_ms))


def normalize_motion(motion: Motion | None) -> Motion:
    """Idempotent: ``normalize_motion(normalize_motion(m)) == normalize_motion(m)``."""
    match motion:
        case None | NoMotion():
            return NoMotion()
        case PathMotion():
            return replace(motion, points=sort_points(motion.points))
        case _:
            assert_never(motion)


def path_points(motion: Motion) -> tuple[Keyframe, ...]:
    match motion:
        case NoMotion():
            return ()
        case PathMotion():
            return motion.points
        case _:
            assert_never(motion)


def evaluate(motion: Motion, fallback: Vec2, time_ms: float) -> Vec2:
    """Position of an entity following ``motion`` at ``time_ms``."""
    match motion:
        case NoMotion():
            return fallback
        case PathMotion():
            return _evaluate_path(motion, fallback, time_ms)
        case _:
            assert_never(motion)


def _evaluate_path(motion: PathMotion, fallback: Vec2, time_ms: float) -> Vec2:
    if not motion.points:
        return fallback

    points = sort_points(motion.points)
    first = points[0]
    last = points[-1]
    span = last.at_ms - first.at_ms
    t = time_ms

    if t <= first.at_ms:
        return Vec2(first.x, first.y)
    if t >= last.at_ms:
        if motion.loop and span > 0:
            t = (t - first.at_ms) % span + first.at_ms
        else:
            return Vec2(last.x, last.y)

    for a, b in zip(points, points[1:]):
        if a.at_ms <= t <= b.at_ms:
            gap = b.at_ms - a.at_ms
            ratio = 0.0 if gap <= 0 else (t - a.at_ms) / gap
            return Vec2(lerp(a.x, b.x, ratio), lerp(a.y, b.y, ratio))
    return fallback


def as_path(motion: Motion) -> PathMotion:
    """View any motion as a path, keeping loop/align flags when present."""
    match motion:
        case NoMotion():
            return PathMotion()
        case PathMotion():
            return motion
        case _:
            assert_never(motion)


# --- Keyframe edits. Every edit re-sorts; indices are not stable. ---


def insert_keyframe(motion: Motion, point: Keyframe) -> PathMotion:
    path = as_path(motion)
    return replace(path, points=sort_points((*path.points, point)))


def update_keyframe(
    motion: Motion,
    index: int,
    *,
    x: float | None = None,
    y: float | None = None,
    at_ms: float | None = None,
) -> PathMotion:
    path = as_path(motion)
    points = list(path.points)
    if not 0 <= index < len(points):
        raise IndexError(f"Keyframe index {index} out of range")
    old = points[index]
    points[index] = Keyframe(
        x=old.x if x is None else x,
        y=old.y if y is None else y,
        at_ms=old.at_ms if at_ms is None else at_ms,
    )
    return replace(path, points=sort_points(points))


def remove_keyframe(motion: Motion, index: int) -> PathMotion:
    path = as_path(motion)
    if not 0 <= index < len(path.points):
        raise IndexError(f"Keyframe index {index} out of range")
    points = path.points[:index] + path.points[index + 1:]
    return replace(path, points=points)


def find_keyframe_near(
    points: Iterable[Keyframe], time_ms: float, tolerance_ms: float
) -> int | None:
    """Index of the first keyframe within ``tolerance_ms`` of ``time_ms``."""
    for index, point in enumerate(points):
        if abs(point.at_ms - time_ms) <= tolerance_ms:
            return index
    return None


def drag_keyframe(
    motion: Motion, position: Vec2, time_ms: float, tolerance_ms: float
) -> PathMotion:
    """Move the keyframe near ``time_ms`` to ``position``, or add one there.

    A keyframe within tolerance is edited in place and the point count is
    unchanged; otherwise exactly one keyframe is inserted at ``time_ms``.
    """
    path = as_path(normalize_motion(motion))
    index = find_keyframe_near(path.points, time_ms, tolerance_ms)
    if index is not None:
        return update_keyframe(path, index, x=position.x, y=position.y)
    return insert_keyframe(path, Keyframe(position.x, position.y, time_ms))


def keyframe_at_time(motion: Motion, fallback: Vec2, time_ms: float) -> PathMotion:
    """Pin the current evaluated position as a new keyframe at ``time_ms``."""
    here = evaluate(motion, fallback, time_ms)
    return insert_keyframe(normalize_motion(motion), Keyframe(here.x, here.y, time_ms))


def set_motion_kind(motion: Motion, kind: str) -> Motion:
    """Switch between none and path. Switching to path keeps existing points."""
    if kind == "none":
        return NoMotion()
    if kind == "path":
        return as_path(normalize_motion(motion))
    raise ValueError(f"Unknown motion kind: {kind!r}")


def set_loop(motion: Motion, loop: bool) -> PathMotion:
    return replace(as_path(motion), loop=loop)
