"""Render frame - what a drawing layer reads from a document each frame."""
from __future__ import annotations

from dataclasses import dataclass

from telegraph.config import KEYFRAME_TOLERANCE_MS
from telegraph.document import selected_entity
from telegraph.motion import evaluate, path_points
from telegraph.types import AoE, Document, Entity, Keyframe, Vec2


@dataclass(frozen=True)
class EntityView:
    entity: Entity
    position: Vec2  # display position at the frame time


@dataclass(frozen=True)
class KeyframeHandle:
    index: int
    point: Keyframe
    active: bool  # within drag tolerance of the frame time


@dataclass(frozen=True)
class RenderFrame:
    time_ms: float
    aoes: tuple[AoE, ...]
    entities: tuple[EntityView, ...]
    handles: tuple[KeyframeHandle, ...]


def visible_aoes(document: Document, time_ms: float | None = None) -> tuple[AoE, ...]:
    """AoEs visible at ``time_ms`` (default: the document clock), back to front."""
    t = document.simulation_time_ms if time_ms is None else time_ms
    return tuple(
        sorted((a for a in document.aoes if a.visible_at(t)), key=lambda a: a.z_index)
    )


def build_frame(
    document: Document, tolerance_ms: float = KEYFRAME_TOLERANCE_MS
) -> RenderFrame:
    t = document.simulation_time_ms
    entities = tuple(
        EntityView(entity=e, position=evaluate(e.motion, e.position, t))
        for e in sorted(document.entities, key=lambda e: e.z_index)
    )
    handles: tuple[KeyframeHandle, ...] = ()
    selected = selected_entity(document)
    if selected is not None:
        handles = tuple(
            KeyframeHandle(
                index=i,
                point=p,
                active=abs(p.at_ms - t) <= tolerance_ms,
            )
            for i, p in enumerate(path_points(selected.motion))
        )
    return RenderFrame(
        time_ms=t,
        aoes=visible_aoes(document, t),
        entities=entities,
        handles=handles,
    )
