"""Document reducers.

Every function here takes a :class:`Document` and returns a new one. Nothing
is mutated in place; a reducer that has nothing to do returns its input
unchanged, so ``result is document`` means "no change". Reducers that create
objects take the :class:`IdGenerator` explicitly.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable, Iterable, TypeVar

from telegraph import motion as _motion
from telegraph.config import (
    ACTION_DURATION_MS,
    ACTION_LEAD_MS,
    AOE_DURATION_MS,
    DUPLICATE_OFFSET,
    KEYFRAME_TOLERANCE_MS,
)
from telegraph.geometry import default_params, next_z_index, sanitize_arena, sanitize_params
from telegraph.ids import IdGenerator
from telegraph.types import (
    ActionPayload,
    AoE,
    AoEShape,
    AoETiming,
    BossAction,
    CircleParams,
    Document,
    Entity,
    EntityType,
    NoMotion,
    PathMotion,
    Selection,
    ToolMode,
    Vec2,
)

T = TypeVar("T", Entity, AoE, BossAction)


def _find(items: Iterable[T], ident: str) -> T | None:
    for item in items:
        if item.id == ident:
            return item
    return None


def _map_one(items: tuple[T, ...], ident: str, fn: Callable[[T], T]) -> tuple[T, ...]:
    return tuple(fn(item) if item.id == ident else item for item in items)


def find_entity(document: Document, entity_id: str) -> Entity | None:
    return _find(document.entities, entity_id)


def find_aoe(document: Document, aoe_id: str) -> AoE | None:
    return _find(document.aoes, aoe_id)


def find_action(document: Document, action_id: str) -> BossAction | None:
    return _find(document.actions, action_id)


def selected_entity(document: Document) -> Entity | None:
    sel = document.selection
    if sel is None or sel.kind != "entity":
        return None
    return find_entity(document, sel.id)


def selected_aoe(document: Document) -> AoE | None:
    sel = document.selection
    if sel is None or sel.kind != "aoe":
        return None
    return find_aoe(document, sel.id)


# --- Session flags ---


def set_tool_mode(document: Document, mode: ToolMode) -> Document:
    if mode not in ("select", "path"):
        raise ValueError(f"Unknown tool mode: {mode!r}")
    return replace(document, tool_mode=mode)


def set_playing(document: Document, playing: bool) -> Document:
    if document.playing == playing:
        return document
    return replace(document, playing=playing)


def clear_selection(document: Document) -> Document:
    if document.selection is None:
        return document
    return replace(document, selection=None)


# --- Entities ---


def add_entity(
    document: Document, ids: IdGenerator, entity_type: EntityType, position: Vec2
) -> Document:
    """Place a new entity on top of the stack and select it."""
    entity = Entity(
        id=ids.next_id(),
        type=entity_type,
        position=position,
        z_index=next_z_index(e.z_index for e in document.entities),
        motion=NoMotion(),
        text="1" if entity_type == "marker" else None,
    )
    return replace(
        document,
        entities=(*document.entities, entity),
        selection=Selection("entity", entity.id),
    )


def select_entity(document: Document, entity_id: str) -> Document:
    """Select an entity and bring it to front."""
    if find_entity(document, entity_id) is None:
        return document
    z = next_z_index(e.z_index for e in document.entities)
    return replace(
        document,
        entities=_map_one(document.entities, entity_id, lambda e: replace(e, z_index=z)),
        selection=Selection("entity", entity_id),
    )


def update_entity(document: Document, entity_id: str, **changes: Any) -> Document:
    if "id" in changes:
        raise TypeError("Entity id cannot be changed")
    if find_entity(document, entity_id) is None:
        return document
    if "motion" in changes:
        changes["motion"] = _motion.normalize_motion(changes["motion"])
    return replace(
        document,
        entities=_map_one(document.entities, entity_id, lambda e: replace(e, **changes)),
    )


def delete_entity(document: Document, entity_id: str) -> Document:
    if find_entity(document, entity_id) is None:
        return document
    selection = document.selection
    if selection == Selection("entity", entity_id):
        selection = None
    return replace(
        document,
        entities=tuple(e for e in document.entities if e.id != entity_id),
        selection=selection,
    )


def duplicate_entity(
    document: Document,
    ids: IdGenerator,
    entity_id: str,
    *,
    offset: float = DUPLICATE_OFFSET,
) -> Document:
    target = find_entity(document, entity_id)
    if target is None:
        return document
    copy = replace(
        target,
        id=ids.next_id(),
        position=Vec2(target.position.x + offset, target.position.y + offset),
        z_index=next_z_index(e.z_index for e in document.entities),
    )
    return replace(
        document,
        entities=(*document.entities, copy),
        selection=Selection("entity", copy.id),
    )


# --- Paths ---


def set_entity_motion(document: Document, entity_id: str, motion: Any) -> Document:
    return update_entity(document, entity_id, motion=motion)


def set_entity_motion_kind(document: Document, entity_id: str, kind: str) -> Document:
    """Switch an entity between a fixed position and a keyframe path."""
    entity = find_entity(document, entity_id)
    if entity is None:
        return document
    return update_entity(
        document, entity_id, motion=_motion.set_motion_kind(entity.motion, kind)
    )


def set_entity_loop(document: Document, entity_id: str, loop: bool) -> Document:
    entity = find_entity(document, entity_id)
    if entity is None:
        return document
    return update_entity(document, entity_id, motion=_motion.set_loop(entity.motion, loop))


def drag_entity(
    document: Document,
    entity_id: str,
    position: Vec2,
    *,
    tolerance_ms: float = KEYFRAME_TOLERANCE_MS,
) -> Document:
    """Apply a drag-to-reposition.

    In path editing (path tool active, or the entity already follows a
    path) the drag edits the keyframe within ``tolerance_ms`` of the
    current time, or inserts one at the current time. Otherwise the raw
    position is moved. Drags during playback are ignored.
    """
    entity = find_entity(document, entity_id)
    if entity is None or document.playing:
        return document
    current = _motion.normalize_motion(entity.motion)
    if document.tool_mode == "path" or isinstance(current, PathMotion):
        moved = _motion.drag_keyframe(
            current, position, document.simulation_time_ms, tolerance_ms
        )
        return update_entity(document, entity_id, motion=moved, position=position)
    return update_entity(document, entity_id, position=position)


def add_keyframe_at_time(document: Document, entity_id: str) -> Document:
    """Pin the entity's displayed position as a keyframe at the current time."""
    entity = find_entity(document, entity_id)
    if entity is None:
        return document
    path = _motion.keyframe_at_time(
        entity.motion, entity.position, document.simulation_time_ms
    )
    return update_entity(document, entity_id, motion=path)


def update_entity_keyframe(
    document: Document, entity_id: str, index: int, **fields: float
) -> Document:
    entity = find_entity(document, entity_id)
    if entity is None:
        return document
    path = _motion.update_keyframe(entity.motion, index, **fields)
    return update_entity(document, entity_id, motion=path)


def remove_entity_keyframe(document: Document, entity_id: str, index: int) -> Document:
    entity = find_entity(document, entity_id)
    if entity is None:
        return document
    return update_entity(
        document, entity_id, motion=_motion.remove_keyframe(entity.motion, index)
    )


# --- AoEs ---


def add_aoe(
    document: Document,
    ids: IdGenerator,
    shape: AoEShape,
    position: Vec2,
    *,
    duration_ms: float = AOE_DURATION_MS,
) -> Document:
    """Place an authored AoE starting at the current time and select it."""
    aoe = AoE(
        id=ids.next_id(),
        params=default_params(shape),
        position=position,
        timing=AoETiming(
            start_at_ms=document.simulation_time_ms,
            delay_ms=0.0,
            duration_ms=duration_ms,
        ),
        z_index=next_z_index(a.z_index for a in document.aoes),
    )
    return replace(
        document,
        aoes=(*document.aoes, aoe),
        selection=Selection("aoe", aoe.id),
    )


def select_aoe(document: Document, aoe_id: str) -> Document:
    if find_aoe(document, aoe_id) is None:
        return document
    z = next_z_index(a.z_index for a in document.aoes)
    return replace(
        document,
        aoes=_map_one(document.aoes, aoe_id, lambda a: replace(a, z_index=z)),
        selection=Selection("aoe", aoe_id),
    )


def update_aoe(document: Document, aoe_id: str, **changes: Any) -> Document:
    """Edit an authored AoE. Derived AoEs belong to the scheduler and are skipped."""
    if "id" in changes or "source_action_id" in changes:
        raise TypeError("AoE identity and ownership cannot be changed")
    target = find_aoe(document, aoe_id)
    if target is None or target.derived:
        return document
    if "params" in changes:
        changes["params"] = sanitize_params(changes["params"])
    return replace(
        document,
        aoes=_map_one(document.aoes, aoe_id, lambda a: replace(a, **changes)),
    )


def delete_aoe(document: Document, aoe_id: str) -> Document:
    target = find_aoe(document, aoe_id)
    if target is None or target.derived:
        return document
    selection = document.selection
    if selection == Selection("aoe", aoe_id):
        selection = None
    return replace(
        document,
        aoes=tuple(a for a in document.aoes if a.id != aoe_id),
        selection=selection,
    )


def duplicate_aoe(
    document: Document,
    ids: IdGenerator,
    aoe_id: str,
    *,
    offset: float = DUPLICATE_OFFSET,
) -> Document:
    """Copy an AoE. The copy is always authored, even when the source was derived."""
    target = find_aoe(document, aoe_id)
    if target is None:
        return document
    copy = replace(
        target,
        id=ids.next_id(),
        position=Vec2(target.position.x + offset, target.position.y + offset),
        z_index=next_z_index(a.z_index for a in document.aoes),
        source_action_id=None,
    )
    return replace(
        document,
        aoes=(*document.aoes, copy),
        selection=Selection("aoe", copy.id),
    )


# --- Selection-driven ---


def delete_selected(document: Document) -> Document:
    sel = document.selection
    if sel is None:
        return document
    if sel.kind == "entity":
        return delete_entity(document, sel.id)
    return delete_aoe(document, sel.id)


def duplicate_selected(
    document: Document, ids: IdGenerator, *, offset: float = DUPLICATE_OFFSET
) -> Document:
    sel = document.selection
    if sel is None:
        return document
    if sel.kind == "entity":
        return duplicate_entity(document, ids, sel.id, offset=offset)
    return duplicate_aoe(document, ids, sel.id, offset=offset)


# --- Arena ---


def update_arena(document: Document, **changes: Any) -> Document:
    if changes.get("shape", "circle") not in ("circle", "rect"):
        raise ValueError(f"Unknown arena shape: {changes['shape']!r}")
    return replace(document, arena=sanitize_arena(replace(document.arena, **changes)))


# --- Actions ---


def add_action(
    document: Document,
    ids: IdGenerator,
    *,
    lead_ms: float = ACTION_LEAD_MS,
    duration_ms: float = ACTION_DURATION_MS,
) -> Document:
    """Append a boss-relative circle cast shortly after the current time."""
    action = BossAction(
        id=ids.next_id(),
        at_ms=float(round(document.simulation_time_ms + lead_ms)),
        payload=ActionPayload(
            params=CircleParams(radius=120.0),
            position_mode="offset",
            offset=Vec2(0.0, 0.0),
            rotation=0.0,
            delay_ms=0.0,
            duration_ms=duration_ms,
        ),
    )
    return replace(document, actions=(*document.actions, action))


def _without_derived(aoes: tuple[AoE, ...], action_id: str) -> tuple[AoE, ...]:
    return tuple(a for a in aoes if a.source_action_id != action_id)


def update_action(document: Document, action_id: str, **changes: Any) -> Document:
    """Edit an action's authored fields.

    The action is un-fired and its derived AoE dropped together; the next
    reconcile re-derives it from the edited definition.
    """
    if "id" in changes or "executed" in changes:
        raise TypeError("Only authored action fields can be changed")
    if find_action(document, action_id) is None:
        return document
    payload = changes.get("payload")
    if payload is not None:
        changes["payload"] = replace(payload, params=sanitize_params(payload.params))
    return replace(
        document,
        actions=_map_one(
            document.actions,
            action_id,
            lambda a: replace(a, executed=False, **changes),
        ),
        aoes=_without_derived(document.aoes, action_id),
    )


def remove_action(document: Document, action_id: str) -> Document:
    if find_action(document, action_id) is None:
        return document
    return replace(
        document,
        actions=tuple(a for a in document.actions if a.id != action_id),
        aoes=_without_derived(document.aoes, action_id),
    )
