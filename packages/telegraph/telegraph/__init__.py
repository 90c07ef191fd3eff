"""telegraph - A deterministic timeline engine for boss encounter authoring."""

from telegraph.config import EditorConfig
from telegraph.ids import IdGenerator
from telegraph.motion import evaluate, normalize_motion
from telegraph.store import DocumentStore
from telegraph.types import (
    ORIGIN,
    ActionPayload,
    AoE,
    AoETiming,
    Arena,
    BossAction,
    CircleParams,
    Document,
    Entity,
    Keyframe,
    LineParams,
    Motion,
    NoMotion,
    PathMotion,
    RectParams,
    RingParams,
    SceneImportError,
    SectorParams,
    Selection,
    SemicircleParams,
    ShapeParams,
    UnknownShapeError,
    Vec2,
)

__all__ = [
    "ActionPayload",
    "AoE",
    "AoETiming",
    "Arena",
    "BossAction",
    "CircleParams",
    "Document",
    "DocumentStore",
    "EditorConfig",
    "Entity",
    "IdGenerator",
    "Keyframe",
    "LineParams",
    "Motion",
    "NoMotion",
    "ORIGIN",
    "PathMotion",
    "RectParams",
    "RingParams",
    "SceneImportError",
    "SectorParams",
    "Selection",
    "SemicircleParams",
    "ShapeParams",
    "UnknownShapeError",
    "Vec2",
    "evaluate",
    "normalize_motion",
]
