"""Action scheduling - fire, synthesize, and rewind boss actions."""
from __future__ import annotations

import math
from dataclasses import replace
from typing import Callable, Iterable, Union

from loguru import logger

from telegraph.geometry import clamp
from telegraph.motion import evaluate
from telegraph.types import ORIGIN, AoE, AoETiming, BossAction, Document, Entity, Vec2

TimeValue = Union[float, Callable[[float], float]]


def find_boss(entities: Iterable[Entity]) -> Entity | None:
    """First entity of type ``boss`` in list order, or None.

    Several bosses are allowed; only the first one anchors offset casts.
    """
    for entity in entities:
        if entity.type == "boss":
            return entity
    return None


def boss_position(entities: Iterable[Entity], time_ms: float) -> Vec2:
    """Where the boss is displayed at ``time_ms``; origin without a boss.

    Offset casts anchor here, so a boss on a path casts from its animated
    position at the action time rather than from its stored ``position``.
    """
    boss = find_boss(entities)
    if boss is None:
        return ORIGIN
    return evaluate(boss.motion, boss.position, time_ms)


def derived_aoe_id(action_id: str) -> str:
    return f"{action_id}:aoe"


def spawn_position(action: BossAction, entities: Iterable[Entity]) -> Vec2:
    payload = action.payload
    if payload.position_mode == "position":
        return payload.position if payload.position is not None else ORIGIN
    offset = payload.offset if payload.offset is not None else ORIGIN
    return boss_position(entities, action.at_ms) + offset


def spawn_aoe(action: BossAction, entities: Iterable[Entity]) -> AoE:
    """Build the AoE an action produces when it fires.

    The position is fixed at cast time; later boss movement does not move
    the hazard.
    """
    payload = action.payload
    return AoE(
        id=derived_aoe_id(action.id),
        params=payload.params,
        position=spawn_position(action, entities),
        rotation=payload.rotation,
        timing=AoETiming(
            start_at_ms=action.at_ms,
            delay_ms=payload.delay_ms,
            duration_ms=payload.duration_ms,
        ),
        z_index=1,
        source_action_id=action.id,
    )


def reconcile(
    time_ms: float,
    actions: tuple[BossAction, ...],
    aoes: tuple[AoE, ...],
    entities: tuple[Entity, ...],
) -> tuple[tuple[BossAction, ...], tuple[AoE, ...]]:
    """Fire every pending action due at or before ``time_ms``.

    Actions fire in list order. Each fired action is marked executed and its
    AoE appended in the same step. Already-executed actions are left alone,
    so reconciling twice at the same time changes nothing, and inputs are
    returned as-is when nothing is due.
    """
    fired: list[BossAction] = []
    spawned: list[AoE] = []
    for action in actions:
        if not action.executed and action.at_ms <= time_ms:
            fired.append(replace(action, executed=True))
            spawned.append(spawn_aoe(action, entities))
    if not fired:
        return actions, aoes

    by_id = {action.id: action for action in fired}
    for action in fired:
        logger.debug(f"Action {action.id} fired at {action.at_ms}ms")
    return (
        tuple(by_id.get(action.id, action) for action in actions),
        (*aoes, *spawned),
    )


def rewind(
    actions: tuple[BossAction, ...], aoes: tuple[AoE, ...]
) -> tuple[tuple[BossAction, ...], tuple[AoE, ...]]:
    """Return to the unfired baseline: no action executed, no derived AoE."""
    return (
        tuple(replace(a, executed=False) if a.executed else a for a in actions),
        tuple(a for a in aoes if not a.derived),
    )


def scrub(document: Document, value: TimeValue) -> Document:
    """Move the clock to ``value`` (or ``value(previous)``) and reconcile.

    The target is clamped to the timeline. Moving backwards rebuilds derived
    state from the baseline, so the result at a given time never depends on
    how the clock got there. Non-finite targets are ignored.
    """
    previous = document.simulation_time_ms
    target = value(previous) if callable(value) else value
    if not math.isfinite(target):
        return document
    clamped = clamp(target, 0.0, document.timeline_duration_ms)

    actions, aoes = document.actions, document.aoes
    if clamped < previous:
        logger.debug(f"Rewinding from {previous}ms to {clamped}ms")
        actions, aoes = rewind(actions, aoes)
    actions, aoes = reconcile(clamped, actions, aoes, document.entities)

    if (
        clamped == previous
        and actions is document.actions
        and aoes is document.aoes
    ):
        return document
    return replace(
        document, actions=actions, aoes=aoes, simulation_time_ms=clamped
    )


def reset_simulation(document: Document) -> Document:
    """Stop, rewind to zero, and drop all derived state."""
    actions, aoes = rewind(document.actions, document.aoes)
    return replace(
        document,
        actions=actions,
        aoes=aoes,
        simulation_time_ms=0.0,
        playing=False,
    )


def set_timeline_duration(document: Document, duration_ms: float) -> Document:
    """Resize the timeline, pulling the clock back inside it if needed."""
    if not math.isfinite(duration_ms) or duration_ms <= 0:
        raise ValueError("duration_ms must be a positive finite number")
    resized = replace(document, timeline_duration_ms=duration_ms)
    return scrub(resized, resized.simulation_time_ms)


def refire(document: Document) -> Document:
    """Reconcile at the current time without moving the clock."""
    actions, aoes = reconcile(
        document.simulation_time_ms,
        document.actions,
        document.aoes,
        document.entities,
    )
    if actions is document.actions and aoes is document.aoes:
        return document
    return replace(document, actions=actions, aoes=aoes)
