"""Scene data model and shared exceptions for the telegraph engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

EntityType = Literal["boss", "player", "item", "marker"]
AoEShape = Literal["circle", "semicircle", "sector", "rect", "line", "ring"]
ArenaShape = Literal["circle", "rect"]
PositionMode = Literal["position", "offset"]
ToolMode = Literal["select", "path"]
SelectionKind = Literal["entity", "aoe"]

ENTITY_TYPES: tuple[EntityType, ...] = ("boss", "player", "item", "marker")
AOE_SHAPES: tuple[AoEShape, ...] = (
    "circle",
    "semicircle",
    "sector",
    "rect",
    "line",
    "ring",
)


@dataclass(frozen=True, slots=True)
class Vec2:
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)


ORIGIN = Vec2(0.0, 0.0)


@dataclass(frozen=True)
class Arena:
    """Static backdrop. ``radius`` applies to circles, ``size`` to rects."""

    shape: ArenaShape = "circle"
    radius: float = 320.0
    size: float = 520.0


# --- Motion (discriminated on ``kind``) ---


@dataclass(frozen=True, slots=True)
class Keyframe:
    x: float
    y: float
    at_ms: float


@dataclass(frozen=True)
class NoMotion:
    kind: Literal["none"] = field(default="none", init=False)


@dataclass(frozen=True)
class PathMotion:
    """Timed path. Points are kept sorted by ``at_ms`` by every edit."""

    points: tuple[Keyframe, ...] = ()
    loop: bool = False
    align_rotation: bool = False  # consumed by renderers only
    kind: Literal["path"] = field(default="path", init=False)


Motion = Union[NoMotion, PathMotion]


# --- AoE shape parameters (discriminated on ``shape``) ---


@dataclass(frozen=True)
class CircleParams:
    radius: float = 120.0
    shape: Literal["circle"] = field(default="circle", init=False)


@dataclass(frozen=True)
class SemicircleParams:
    radius: float = 150.0
    shape: Literal["semicircle"] = field(default="semicircle", init=False)


@dataclass(frozen=True)
class SectorParams:
    radius: float = 200.0
    angle: float = 90.0  # degrees
    shape: Literal["sector"] = field(default="sector", init=False)


@dataclass(frozen=True)
class RectParams:
    width: float = 180.0
    height: float = 80.0
    shape: Literal["rect"] = field(default="rect", init=False)


@dataclass(frozen=True)
class LineParams:
    length: float = 240.0
    width: float = 30.0
    shape: Literal["line"] = field(default="line", init=False)


@dataclass(frozen=True)
class RingParams:
    inner_radius: float = 60.0
    outer_radius: float = 140.0
    shape: Literal["ring"] = field(default="ring", init=False)


ShapeParams = Union[
    CircleParams,
    SemicircleParams,
    SectorParams,
    RectParams,
    LineParams,
    RingParams,
]


# --- Scene objects ---


@dataclass(frozen=True)
class Entity:
    id: str
    type: EntityType
    position: Vec2
    z_index: int = 1
    motion: Motion = NoMotion()
    text: str | None = None  # marker label


@dataclass(frozen=True)
class AoETiming:
    start_at_ms: float = 0.0
    delay_ms: float = 0.0
    duration_ms: float = 4000.0

    @property
    def visible_from(self) -> float:
        return self.start_at_ms + self.delay_ms

    @property
    def visible_until(self) -> float:
        return self.start_at_ms + self.delay_ms + self.duration_ms

    def visible_at(self, time_ms: float) -> bool:
        """Inclusive on both ends."""
        return self.visible_from <= time_ms <= self.visible_until


@dataclass(frozen=True)
class AoE:
    id: str
    params: ShapeParams
    position: Vec2
    rotation: float = 0.0  # degrees
    timing: AoETiming = AoETiming()
    z_index: int = 1
    source_action_id: str | None = None

    @property
    def shape(self) -> AoEShape:
        return self.params.shape

    @property
    def derived(self) -> bool:
        """True when the AoE was synthesized by a fired action."""
        return self.source_action_id is not None

    def visible_at(self, time_ms: float) -> bool:
        return self.timing.visible_at(time_ms)


@dataclass(frozen=True)
class ActionPayload:
    params: ShapeParams
    position_mode: PositionMode = "offset"
    position: Vec2 | None = None
    offset: Vec2 | None = None
    rotation: float = 0.0
    delay_ms: float = 0.0
    duration_ms: float = 3000.0

    @property
    def shape(self) -> AoEShape:
        return self.params.shape


@dataclass(frozen=True)
class BossAction:
    """Scheduled AoE spawn. ``executed`` is engine state, never authored."""

    id: str
    at_ms: float
    payload: ActionPayload
    executed: bool = False
    type: Literal["spawnAoE"] = field(default="spawnAoE", init=False)


@dataclass(frozen=True)
class Selection:
    kind: SelectionKind
    id: str


@dataclass(frozen=True)
class Document:
    """One immutable snapshot of the authored scene plus clock state."""

    arena: Arena = Arena()
    entities: tuple[Entity, ...] = ()
    aoes: tuple[AoE, ...] = ()
    actions: tuple[BossAction, ...] = ()
    timeline_duration_ms: float = 120000.0
    simulation_time_ms: float = 0.0
    playing: bool = False
    selection: Selection | None = None
    tool_mode: ToolMode = "select"


class SceneImportError(ValueError):
    """Raised when a scene payload cannot be decoded as a whole."""


class UnknownShapeError(ValueError):
    """Raised on an unrecognised shape or motion discriminant."""

    def __init__(self, kind: str, value: object) -> None:
        self.kind = kind
        self.value = value
        super().__init__(f"Unknown {kind}: {value!r}")
