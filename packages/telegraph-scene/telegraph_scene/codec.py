"""Scene JSON codec.

Exports carry authored content only: derived AoEs are left out and every
action is written as not executed. Imports are defensive. Missing sections
fall back to defaults, derived state in the payload is discarded, and any
structural problem rejects the payload as a whole with
:class:`SceneImportError`.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, replace
from typing import Any, assert_never

from telegraph.config import ACTION_DURATION_MS, AOE_DURATION_MS, TIMELINE_DURATION_MS
from telegraph.geometry import parse_number
from telegraph.ids import IdGenerator
from telegraph.motion import normalize_motion
from telegraph.types import (
    AOE_SHAPES,
    ENTITY_TYPES,
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
    SemicircleParams,
    ShapeParams,
    UnknownShapeError,
    Vec2,
)
from telegraph_scene.defaults import DEFAULT_ARENA, default_entities


@dataclass(frozen=True)
class Scene:
    """Decoded scene content, ready to replace a document's authored state."""

    arena: Arena
    entities: tuple[Entity, ...]
    aoes: tuple[AoE, ...]
    actions: tuple[BossAction, ...]
    timeline_duration_ms: float


# --- Encoding ---


def encode_vec(vec: Vec2) -> dict[str, float]:
    return {"x": vec.x, "y": vec.y}


def encode_params(params: ShapeParams) -> dict[str, float]:
    match params:
        case CircleParams() | SemicircleParams():
            return {"radius": params.radius}
        case SectorParams():
            return {"radius": params.radius, "angle": params.angle}
        case RectParams():
            return {"width": params.width, "height": params.height}
        case LineParams():
            return {"length": params.length, "width": params.width}
        case RingParams():
            return {
                "innerRadius": params.inner_radius,
                "outerRadius": params.outer_radius,
            }
        case _:
            assert_never(params)


def encode_motion(motion: Motion) -> dict[str, Any]:
    match motion:
        case NoMotion():
            return {"kind": "none"}
        case PathMotion():
            return {
                "kind": "path",
                "points": [
                    {"x": p.x, "y": p.y, "atMs": p.at_ms} for p in motion.points
                ],
                "loop": motion.loop,
                "alignRotation": motion.align_rotation,
            }
        case _:
            assert_never(motion)


def encode_entity(entity: Entity) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": entity.id,
        "type": entity.type,
        "position": encode_vec(entity.position),
        "zIndex": entity.z_index,
        "motion": encode_motion(entity.motion),
    }
    if entity.text is not None:
        data["text"] = entity.text
    return data


def encode_aoe(aoe: AoE) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": aoe.id,
        "type": "aoe",
        "shape": aoe.shape,
        "shapeParams": encode_params(aoe.params),
        "position": encode_vec(aoe.position),
        "rotation": aoe.rotation,
        "timing": {
            "startAtMs": aoe.timing.start_at_ms,
            "delayMs": aoe.timing.delay_ms,
            "durationMs": aoe.timing.duration_ms,
        },
        "zIndex": aoe.z_index,
    }
    if aoe.source_action_id is not None:
        data["sourceActionId"] = aoe.source_action_id
    return data


def encode_action(action: BossAction) -> dict[str, Any]:
    payload = action.payload
    encoded: dict[str, Any] = {
        "shape": payload.shape,
        "shapeParams": encode_params(payload.params),
        "positionMode": payload.position_mode,
    }
    if payload.position is not None:
        encoded["position"] = encode_vec(payload.position)
    if payload.offset is not None:
        encoded["offset"] = encode_vec(payload.offset)
    encoded["rotation"] = payload.rotation
    encoded["delayMs"] = payload.delay_ms
    encoded["durationMs"] = payload.duration_ms
    return {
        "id": action.id,
        "atMs": action.at_ms,
        "type": action.type,
        "payload": encoded,
        "executed": action.executed,
    }


def export_scene(document: Document) -> dict[str, Any]:
    """Authored content of ``document`` as a JSON-compatible dict."""
    return {
        "arena": {
            "shape": document.arena.shape,
            "radius": document.arena.radius,
            "size": document.arena.size,
        },
        "entities": [encode_entity(e) for e in document.entities],
        "aoes": [encode_aoe(a) for a in document.aoes if not a.derived],
        "actions": [
            encode_action(replace(a, executed=False)) for a in document.actions
        ],
        "timelineDurationMs": document.timeline_duration_ms,
    }


def dumps(document: Document, indent: int | None = 2) -> str:
    return json.dumps(export_scene(document), indent=indent)


# --- Decoding ---


def _mapping(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{what} must be an object, got {type(value).__name__}")
    return value


def _sequence(value: Any, what: str) -> list[Any]:
    if not isinstance(value, list):
        raise ValueError(f"{what} must be a list, got {type(value).__name__}")
    return value


def decode_vec(raw: Any, fallback: Vec2 = ORIGIN) -> Vec2:
    if raw is None:
        return fallback
    data = _mapping(raw, "vector")
    return Vec2(
        parse_number(data.get("x"), fallback.x),
        parse_number(data.get("y"), fallback.y),
    )


def decode_params(shape: Any, raw: Any) -> ShapeParams:
    data = _mapping(raw if raw is not None else {}, "shapeParams")

    def num(key: str, fallback: float) -> float:
        return parse_number(data.get(key), fallback)

    if shape not in AOE_SHAPES:
        raise UnknownShapeError("AoE shape", shape)
    match shape:
        case "circle":
            return CircleParams(radius=num("radius", 120.0))
        case "semicircle":
            return SemicircleParams(radius=num("radius", 150.0))
        case "sector":
            return SectorParams(radius=num("radius", 200.0), angle=num("angle", 90.0))
        case "rect":
            return RectParams(width=num("width", 180.0), height=num("height", 80.0))
        case "line":
            return LineParams(length=num("length", 240.0), width=num("width", 30.0))
        case "ring":
            return RingParams(
                inner_radius=num("innerRadius", 60.0),
                outer_radius=num("outerRadius", 140.0),
            )
        case _:
            assert_never(shape)


def decode_motion(raw: Any) -> Motion:
    if raw is None:
        return NoMotion()
    data = _mapping(raw, "motion")
    kind = data.get("kind")
    if kind == "none":
        return NoMotion()
    if kind == "path":
        points: list[Keyframe] = []
        for raw_point in _optional_sequence(data.get("points"), "points"):
            point = _mapping(raw_point, "keyframe")
            points.append(
                Keyframe(
                    x=parse_number(point.get("x"), 0.0),
                    y=parse_number(point.get("y"), 0.0),
                    at_ms=parse_number(point.get("atMs"), 0.0),
                )
            )
        return normalize_motion(
            PathMotion(
                points=tuple(points),
                loop=data.get("loop") is True,
                align_rotation=data.get("alignRotation") is True,
            )
        )
    raise UnknownShapeError("motion kind", kind)


def decode_arena(raw: Any) -> Arena:
    if raw is None:
        return DEFAULT_ARENA
    data = _mapping(raw, "arena")
    shape = data.get("shape", DEFAULT_ARENA.shape)
    if shape not in ("circle", "rect"):
        raise UnknownShapeError("arena shape", shape)
    return Arena(
        shape=shape,
        radius=parse_number(data.get("radius"), DEFAULT_ARENA.radius),
        size=parse_number(data.get("size"), DEFAULT_ARENA.size),
    )


def _optional_sequence(value: Any, what: str) -> list[Any]:
    return [] if value is None else _sequence(value, what)


def _reserve_ids(root: dict[str, Any], ids: IdGenerator) -> None:
    """Observe every explicit id before any missing one is generated."""
    for section in ("entities", "aoes", "actions"):
        records = root.get(section)
        if not isinstance(records, list):
            continue
        for record in records:
            if isinstance(record, dict) and record.get("id") not in (None, ""):
                ids.observe(str(record["id"]))


def _decode_id(data: dict[str, Any], ids: IdGenerator) -> str:
    ident = data.get("id")
    if ident is None or ident == "":
        return ids.next_id()
    return str(ident)


def decode_entity(raw: Any, ids: IdGenerator) -> Entity:
    data = _mapping(raw, "entity")
    entity_type = data.get("type")
    if entity_type not in ENTITY_TYPES:
        raise ValueError(f"Unknown entity type: {entity_type!r}")
    text = data.get("text")
    if entity_type == "marker" and not isinstance(text, str):
        text = "1"
    return Entity(
        id=_decode_id(data, ids),
        type=entity_type,
        position=decode_vec(data.get("position")),
        z_index=int(parse_number(data.get("zIndex"), 1)),
        motion=decode_motion(data.get("motion")),
        text=text if isinstance(text, str) else None,
    )


def decode_aoe(raw: Any, ids: IdGenerator) -> AoE:
    data = _mapping(raw, "aoe")
    timing = _mapping(data.get("timing", {}), "timing")
    return AoE(
        id=_decode_id(data, ids),
        params=decode_params(data.get("shape"), data.get("shapeParams")),
        position=decode_vec(data.get("position")),
        rotation=parse_number(data.get("rotation"), 0.0),
        timing=AoETiming(
            start_at_ms=parse_number(timing.get("startAtMs"), 0.0),
            delay_ms=parse_number(timing.get("delayMs"), 0.0),
            duration_ms=parse_number(timing.get("durationMs"), AOE_DURATION_MS),
        ),
        z_index=int(parse_number(data.get("zIndex"), 1)),
    )


def decode_action(raw: Any, ids: IdGenerator) -> BossAction:
    data = _mapping(raw, "action")
    action_type = data.get("type", "spawnAoE")
    if action_type != "spawnAoE":
        raise ValueError(f"Unknown action type: {action_type!r}")
    payload = _mapping(data.get("payload"), "payload")
    mode = payload.get("positionMode", "offset")
    if mode not in ("position", "offset"):
        raise ValueError(f"Unknown position mode: {mode!r}")
    return BossAction(
        id=_decode_id(data, ids),
        at_ms=parse_number(data.get("atMs"), 0.0),
        payload=ActionPayload(
            params=decode_params(payload.get("shape"), payload.get("shapeParams")),
            position_mode=mode,
            position=decode_vec(payload["position"]) if payload.get("position") is not None else None,
            offset=decode_vec(payload["offset"]) if payload.get("offset") is not None else None,
            rotation=parse_number(payload.get("rotation"), 0.0),
            delay_ms=parse_number(payload.get("delayMs"), 0.0),
            duration_ms=parse_number(payload.get("durationMs"), ACTION_DURATION_MS),
        ),
        executed=False,
    )


def decode_scene(data: Any, ids: IdGenerator) -> Scene:
    """Decode an already-parsed payload. Raises SceneImportError."""
    try:
        root = _mapping(data, "scene")
        _reserve_ids(root, ids)
        raw_entities = root.get("entities")
        if raw_entities is None:
            entities = default_entities(ids)
        else:
            entities = tuple(decode_entity(e, ids) for e in _sequence(raw_entities, "entities"))
        aoes = tuple(
            decode_aoe(a, ids)
            for a in _optional_sequence(root.get("aoes"), "aoes")
            if not (isinstance(a, dict) and a.get("sourceActionId"))
        )
        actions = tuple(
            decode_action(a, ids)
            for a in _optional_sequence(root.get("actions"), "actions")
        )
        duration = parse_number(root.get("timelineDurationMs"), TIMELINE_DURATION_MS)
        return Scene(
            arena=decode_arena(root.get("arena")),
            entities=entities,
            aoes=aoes,
            actions=actions,
            timeline_duration_ms=duration if duration > 0 else TIMELINE_DURATION_MS,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise SceneImportError(f"Invalid scene: {exc}") from exc


def loads(raw: str | bytes, ids: IdGenerator) -> Scene:
    """Parse scene JSON. Raises SceneImportError on any failure."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise SceneImportError(f"Invalid scene JSON: {exc}") from exc
    return decode_scene(data, ids)


def apply_scene(document: Document, scene: Scene) -> Document:
    """Replace authored content and restart the clock at zero, paused."""
    return replace(
        document,
        arena=scene.arena,
        entities=scene.entities,
        aoes=scene.aoes,
        actions=scene.actions,
        timeline_duration_ms=scene.timeline_duration_ms,
        simulation_time_ms=0.0,
        playing=False,
        selection=None,
    )
