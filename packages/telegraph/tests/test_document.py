"""Tests for document reducers."""
from __future__ import annotations

from dataclasses import replace

import pytest
from telegraph import document as ops
from telegraph.ids import IdGenerator
from telegraph.types import (
    ActionPayload,
    AoE,
    AoETiming,
    BossAction,
    CircleParams,
    Document,
    Entity,
    Keyframe,
    NoMotion,
    PathMotion,
    RectParams,
    Selection,
    Vec2,
)


def _doc() -> Document:
    return Document(
        entities=(
            Entity(id="boss", type="boss", position=Vec2(0, 0), z_index=2),
            Entity(id="p1", type="player", position=Vec2(10, 10), z_index=1),
        ),
        aoes=(
            AoE(id="a1", params=CircleParams(), position=Vec2(0, 0), z_index=3),
            AoE(
                id="act1:aoe",
                params=CircleParams(),
                position=Vec2(5, 5),
                source_action_id="act1",
            ),
        ),
        actions=(
            BossAction(
                id="act1",
                at_ms=1000,
                payload=ActionPayload(params=CircleParams()),
                executed=True,
            ),
        ),
    )


class TestEntities:
    def test_add_entity_on_top_and_selected(self) -> None:
        ids = IdGenerator()
        doc = ops.add_entity(_doc(), ids, "player", Vec2(1, 2))
        added = doc.entities[-1]
        assert added.id == "id_1"
        assert added.z_index == 3
        assert added.motion == NoMotion()
        assert doc.selection == Selection("entity", "id_1")

    def test_marker_gets_label(self) -> None:
        doc = ops.add_entity(Document(), IdGenerator(), "marker", Vec2())
        assert doc.entities[0].text == "1"
        assert doc.entities[0].z_index == 1

    def test_select_brings_to_front(self) -> None:
        doc = ops.select_entity(_doc(), "p1")
        assert ops.find_entity(doc, "p1").z_index == 3
        assert doc.selection == Selection("entity", "p1")

    def test_select_unknown_is_noop(self) -> None:
        doc = _doc()
        assert ops.select_entity(doc, "ghost") is doc

    def test_update_normalizes_motion(self) -> None:
        motion = PathMotion(points=(Keyframe(1, 1, 500), Keyframe(0, 0, 0)))
        doc = ops.update_entity(_doc(), "p1", motion=motion)
        assert [p.at_ms for p in ops.find_entity(doc, "p1").motion.points] == [0, 500]

    def test_update_rejects_id_change(self) -> None:
        with pytest.raises(TypeError):
            ops.update_entity(_doc(), "p1", id="other")

    def test_original_untouched(self) -> None:
        doc = _doc()
        ops.update_entity(doc, "p1", position=Vec2(99, 99))
        assert ops.find_entity(doc, "p1").position == Vec2(10, 10)

    def test_delete_clears_selection(self) -> None:
        doc = ops.select_entity(_doc(), "p1")
        doc = ops.delete_selected(doc)
        assert ops.find_entity(doc, "p1") is None
        assert doc.selection is None

    def test_duplicate_offsets_and_elevates(self) -> None:
        ids = IdGenerator()
        doc = ops.duplicate_entity(_doc(), ids, "p1")
        copy = doc.entities[-1]
        assert copy.id == "id_1"
        assert copy.position == Vec2(30, 30)
        assert copy.z_index == 3
        assert copy.type == "player"
        assert doc.selection == Selection("entity", "id_1")


class TestAoEs:
    def test_add_aoe_starts_now(self) -> None:
        doc = Document(simulation_time_ms=1500)
        doc = ops.add_aoe(doc, IdGenerator(), "rect", Vec2(3, 4))
        aoe = doc.aoes[0]
        assert aoe.params == RectParams()
        assert aoe.timing == AoETiming(start_at_ms=1500, delay_ms=0, duration_ms=4000)
        assert doc.selection == Selection("aoe", aoe.id)

    def test_update_sanitizes_params(self) -> None:
        doc = ops.update_aoe(_doc(), "a1", params=CircleParams(radius=0))
        assert ops.find_aoe(doc, "a1").params.radius == 10

    def test_derived_aoe_not_editable(self) -> None:
        doc = _doc()
        assert ops.update_aoe(doc, "act1:aoe", rotation=45) is doc
        assert ops.delete_aoe(doc, "act1:aoe") is doc

    def test_duplicate_derived_becomes_authored(self) -> None:
        doc = ops.duplicate_aoe(_doc(), IdGenerator(), "act1:aoe")
        copy = doc.aoes[-1]
        assert copy.source_action_id is None
        assert copy.position == Vec2(25, 25)
        assert copy.z_index == 4

    def test_select_aoe_brings_to_front(self) -> None:
        doc = ops.select_aoe(_doc(), "act1:aoe")
        assert ops.find_aoe(doc, "act1:aoe").z_index == 4


class TestArena:
    def test_update_arena_clamps(self) -> None:
        doc = ops.update_arena(_doc(), radius=10)
        assert doc.arena.radius == 50

    def test_unknown_shape(self) -> None:
        with pytest.raises(ValueError):
            ops.update_arena(_doc(), shape="hexagon")


class TestActions:
    def test_add_action_after_now(self) -> None:
        doc = ops.add_action(Document(simulation_time_ms=1234.4), IdGenerator())
        action = doc.actions[0]
        assert action.at_ms == 3234
        assert action.executed is False
        assert action.payload.position_mode == "offset"
        assert action.payload.duration_ms == 3000

    def test_update_unfires_pair(self) -> None:
        doc = ops.update_action(_doc(), "act1", at_ms=5000)
        action = ops.find_action(doc, "act1")
        assert action.at_ms == 5000
        assert action.executed is False
        assert all(a.source_action_id != "act1" for a in doc.aoes)

    def test_update_cannot_set_executed(self) -> None:
        with pytest.raises(TypeError):
            ops.update_action(_doc(), "act1", executed=False)

    def test_remove_drops_derived(self) -> None:
        doc = ops.remove_action(_doc(), "act1")
        assert doc.actions == ()
        assert [a.id for a in doc.aoes] == ["a1"]


class TestDrag:
    def test_plain_move_in_select_mode(self) -> None:
        doc = ops.drag_entity(_doc(), "p1", Vec2(50, 60))
        entity = ops.find_entity(doc, "p1")
        assert entity.position == Vec2(50, 60)
        assert entity.motion == NoMotion()

    def test_path_mode_inserts_keyframe(self) -> None:
        doc = ops.set_tool_mode(_doc(), "path")
        doc = replace(doc, simulation_time_ms=800)
        doc = ops.drag_entity(doc, "p1", Vec2(50, 60))
        motion = ops.find_entity(doc, "p1").motion
        assert motion.points == (Keyframe(50, 60, 800),)

    def test_existing_path_edits_near_keyframe(self) -> None:
        path = PathMotion(points=(Keyframe(0, 0, 0), Keyframe(100, 0, 1000)))
        doc = ops.update_entity(_doc(), "p1", motion=path)
        doc = replace(doc, simulation_time_ms=900)
        doc = ops.drag_entity(doc, "p1", Vec2(5, 5))
        points = ops.find_entity(doc, "p1").motion.points
        assert len(points) == 2
        assert points[1] == Keyframe(5, 5, 1000)

    def test_ignored_while_playing(self) -> None:
        doc = ops.set_playing(_doc(), True)
        assert ops.drag_entity(doc, "p1", Vec2(1, 1)) is doc

    def test_add_keyframe_at_time(self) -> None:
        doc = replace(_doc(), simulation_time_ms=250)
        doc = ops.add_keyframe_at_time(doc, "p1")
        assert ops.find_entity(doc, "p1").motion.points == (Keyframe(10, 10, 250),)

    def test_keyframe_update_and_remove(self) -> None:
        path = PathMotion(points=(Keyframe(0, 0, 0), Keyframe(100, 0, 1000)))
        doc = ops.update_entity(_doc(), "p1", motion=path)
        doc = ops.update_entity_keyframe(doc, "p1", 0, at_ms=1500)
        points = ops.find_entity(doc, "p1").motion.points
        assert [p.at_ms for p in points] == [1000, 1500]
        doc = ops.remove_entity_keyframe(doc, "p1", 0)
        assert ops.find_entity(doc, "p1").motion.points == (Keyframe(0, 0, 1500),)

    def test_motion_kind_and_loop(self) -> None:
        path = PathMotion(points=(Keyframe(0, 0, 0), Keyframe(100, 0, 1000)))
        doc = ops.update_entity(_doc(), "p1", motion=path)
        doc = ops.set_entity_loop(doc, "p1", True)
        assert ops.find_entity(doc, "p1").motion == replace(path, loop=True)
        doc = ops.set_entity_motion_kind(doc, "p1", "none")
        assert ops.find_entity(doc, "p1").motion == NoMotion()
        doc = ops.set_entity_motion_kind(doc, "p1", "path")
        assert ops.find_entity(doc, "p1").motion == PathMotion()
        assert ops.set_entity_loop(doc, "ghost", True) is doc
