"""Default scene content for new and incomplete documents."""
from __future__ import annotations

from telegraph.config import EditorConfig
from telegraph.ids import IdGenerator
from telegraph.types import (
    ActionPayload,
    Arena,
    BossAction,
    CircleParams,
    Document,
    Entity,
    NoMotion,
    SectorParams,
    Vec2,
)

DEFAULT_ARENA = Arena(shape="circle", radius=320.0, size=520.0)


def default_entities(ids: IdGenerator) -> tuple[Entity, ...]:
    """One boss at the origin and two players."""
    return (
        Entity(id=ids.next_id(), type="boss", position=Vec2(0.0, 0.0), z_index=2, motion=NoMotion()),
        Entity(id=ids.next_id(), type="player", position=Vec2(-120.0, 80.0), z_index=1, motion=NoMotion()),
        Entity(id=ids.next_id(), type="player", position=Vec2(140.0, -60.0), z_index=1, motion=NoMotion()),
    )


def default_actions(ids: IdGenerator) -> tuple[BossAction, ...]:
    return (
        BossAction(
            id=ids.next_id(),
            at_ms=2000.0,
            payload=ActionPayload(
                params=CircleParams(radius=120.0),
                position_mode="offset",
                offset=Vec2(120.0, 0.0),
                rotation=0.0,
                delay_ms=0.0,
                duration_ms=3000.0,
            ),
        ),
        BossAction(
            id=ids.next_id(),
            at_ms=6000.0,
            payload=ActionPayload(
                params=SectorParams(radius=200.0, angle=90.0),
                position_mode="offset",
                offset=Vec2(0.0, 0.0),
                rotation=45.0,
                delay_ms=500.0,
                duration_ms=4000.0,
            ),
        ),
    )


def new_document(ids: IdGenerator, config: EditorConfig | None = None) -> Document:
    """Starter document: default arena, three entities, two boss casts."""
    config = config or EditorConfig()
    return Document(
        arena=DEFAULT_ARENA,
        entities=default_entities(ids),
        aoes=(),
        actions=default_actions(ids),
        timeline_duration_ms=config.timeline_duration_ms,
    )
