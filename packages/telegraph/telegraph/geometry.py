"""Pure geometry and time helpers: clamping, angles, interpolation, guards."""
from __future__ import annotations

import math
from dataclasses import replace
from typing import Any, Iterable, assert_never

from telegraph.types import (
    AoEShape,
    Arena,
    CircleParams,
    LineParams,
    RectParams,
    RingParams,
    SectorParams,
    SemicircleParams,
    ShapeParams,
    Vec2,
)

MIN_RADIUS = 10.0
MIN_SECTOR_ANGLE = 5.0
MAX_SECTOR_ANGLE = 355.0
MIN_RECT_SIDE = 20.0
MIN_LINE_LENGTH = 20.0
MIN_LINE_WIDTH = 6.0
MIN_RING_INNER = 6.0
MIN_RING_GAP = 6.0
MIN_ARENA_RADIUS = 50.0
MIN_ARENA_SIZE = 100.0


def clamp(value: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, value))


def to_rad(degrees: float) -> float:
    return degrees * math.pi / 180


def to_deg(radians: float) -> float:
    return radians * 180 / math.pi


def lerp(a: float, b: float, ratio: float) -> float:
    return a + (b - a) * ratio


def lerp_vec(a: Vec2, b: Vec2, ratio: float) -> Vec2:
    return Vec2(lerp(a.x, b.x, ratio), lerp(a.y, b.y, ratio))


def parse_number(value: Any, fallback: float = 0.0) -> float:
    """Coerce user or file input to a finite number, else ``fallback``.

    Ints and floats pass through unchanged; strings are parsed. Booleans,
    ``None``, NaN and infinities all yield the fallback.
    """
    if isinstance(value, bool) or value is None:
        return fallback
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else fallback
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return fallback
        return parsed if math.isfinite(parsed) else fallback
    return fallback


def next_z_index(z_indices: Iterable[int]) -> int:
    """Front-most z: one above the current maximum, never below 1."""
    return max((0, *z_indices)) + 1


def default_params(shape: AoEShape) -> ShapeParams:
    match shape:
        case "circle":
            return CircleParams()
        case "semicircle":
            return SemicircleParams()
        case "sector":
            return SectorParams()
        case "rect":
            return RectParams()
        case "line":
            return LineParams()
        case "ring":
            return RingParams()
        case _:
            assert_never(shape)


def sanitize_params(params: ShapeParams) -> ShapeParams:
    """Clamp freehand-edited dimensions to their smallest drawable values."""
    match params:
        case CircleParams(radius=radius) | SemicircleParams(radius=radius):
            return replace(params, radius=max(MIN_RADIUS, radius))
        case SectorParams():
            return replace(
                params,
                radius=max(MIN_RADIUS, params.radius),
                angle=clamp(params.angle, MIN_SECTOR_ANGLE, MAX_SECTOR_ANGLE),
            )
        case RectParams():
            return replace(
                params,
                width=max(MIN_RECT_SIDE, params.width),
                height=max(MIN_RECT_SIDE, params.height),
            )
        case LineParams():
            return replace(
                params,
                length=max(MIN_LINE_LENGTH, params.length),
                width=max(MIN_LINE_WIDTH, params.width),
            )
        case RingParams():
            inner = max(MIN_RING_INNER, params.inner_radius)
            outer = max(inner + MIN_RING_GAP, params.outer_radius)
            return replace(params, inner_radius=inner, outer_radius=outer)
        case _:
            assert_never(params)


def sanitize_arena(arena: Arena) -> Arena:
    return replace(
        arena,
        radius=max(MIN_ARENA_RADIUS, arena.radius),
        size=max(MIN_ARENA_SIZE, arena.size),
    )
