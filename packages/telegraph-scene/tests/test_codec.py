"""Tests for scene export/import."""
from __future__ import annotations

import json
from dataclasses import replace

import pytest
from telegraph.ids import IdGenerator
from telegraph.types import (
    ActionPayload,
    AoE,
    AoETiming,
    BossAction,
    Document,
    Entity,
    Keyframe,
    LineParams,
    NoMotion,
    PathMotion,
    RingParams,
    SceneImportError,
    SectorParams,
    Selection,
    Vec2,
)
from telegraph_scene.codec import apply_scene, decode_scene, dumps, export_scene, loads
from telegraph_scene.defaults import DEFAULT_ARENA, new_document
from telegraph_schedule.scheduler import scrub


def _scene_doc() -> Document:
    ids = IdGenerator()
    doc = new_document(ids)
    boss = doc.entities[0]
    doc = replace(
        doc,
        entities=(
            replace(
                boss,
                motion=PathMotion(
                    points=(Keyframe(0, 0, 0), Keyframe(100, 50, 3000)),
                    loop=True,
                    align_rotation=True,
                ),
            ),
            *doc.entities[1:],
            Entity(id="m", type="marker", position=Vec2(5, 5), z_index=4, text="A"),
        ),
        aoes=(
            AoE(
                id="ring",
                params=RingParams(inner_radius=30, outer_radius=90),
                position=Vec2(1, 2),
                rotation=15,
                timing=AoETiming(start_at_ms=100, delay_ms=50, duration_ms=900),
                z_index=2,
            ),
            AoE(id="line", params=LineParams(), position=Vec2(0, 0)),
        ),
    )
    return scrub(doc, 8000)


class TestExport:
    def test_strips_derived_state(self) -> None:
        doc = _scene_doc()
        assert sum(1 for a in doc.aoes if a.derived) == 2
        assert all(a.executed for a in doc.actions)
        data = export_scene(doc)
        assert all("sourceActionId" not in a for a in data["aoes"])
        assert [a["id"] for a in data["aoes"]] == ["ring", "line"]
        assert all(a["executed"] is False for a in data["actions"])

    def test_camel_case_fields(self) -> None:
        data = export_scene(_scene_doc())
        assert data["timelineDurationMs"] == 120000
        ring = data["aoes"][0]
        assert ring["shapeParams"] == {"innerRadius": 30, "outerRadius": 90}
        assert ring["timing"] == {"startAtMs": 100, "delayMs": 50, "durationMs": 900}
        assert ring["zIndex"] == 2
        boss = data["entities"][0]
        assert boss["motion"]["alignRotation"] is True
        assert boss["motion"]["points"][1] == {"x": 100, "y": 50, "atMs": 3000}
        action = data["actions"][0]
        assert action["type"] == "spawnAoE"
        assert action["payload"]["positionMode"] == "offset"
        assert action["payload"]["offset"] == {"x": 120, "y": 0}
        assert "position" not in action["payload"]

    def test_round_trip_is_fixed_point(self) -> None:
        first = export_scene(_scene_doc())
        scene = loads(json.dumps(first), IdGenerator())
        second = export_scene(apply_scene(Document(), scene))
        assert second == first

    def test_dumps_is_json(self) -> None:
        assert json.loads(dumps(_scene_doc()))["arena"]["radius"] == 320


class TestImport:
    def test_malformed_json(self) -> None:
        with pytest.raises(SceneImportError):
            loads("{not json", IdGenerator())

    @pytest.mark.parametrize(
        "payload",
        [
            "[]",
            '{"entities": {}}',
            '{"entities": [{"type": "dragon"}]}',
            '{"aoes": [{"shape": "hexagon"}]}',
            '{"entities": [{"type": "boss", "motion": {"kind": "spline"}}]}',
            '{"actions": [{"type": "teleport", "payload": {}}]}',
            '{"actions": [{"payload": {"shape": "circle", "positionMode": "orbit"}}]}',
            '{"arena": {"shape": "triangle"}}',
        ],
    )
    def test_structural_errors_rejected(self, payload: str) -> None:
        with pytest.raises(SceneImportError):
            loads(payload, IdGenerator())

    def test_missing_sections_fall_back(self) -> None:
        scene = loads("{}", IdGenerator())
        assert scene.arena == DEFAULT_ARENA
        assert [e.type for e in scene.entities] == ["boss", "player", "player"]
        assert scene.entities[0].position == Vec2(0, 0)
        assert scene.aoes == ()
        assert scene.actions == ()
        assert scene.timeline_duration_ms == 120000

    def test_missing_motion_becomes_none(self) -> None:
        scene = loads('{"entities": [{"id": "e", "type": "item"}]}', IdGenerator())
        assert scene.entities[0].motion == NoMotion()

    def test_derived_aoes_dropped(self) -> None:
        payload = {
            "aoes": [
                {"id": "keep", "shape": "circle", "shapeParams": {"radius": 40}},
                {"id": "drop", "shape": "circle", "sourceActionId": "x"},
            ]
        }
        scene = decode_scene(payload, IdGenerator())
        assert [a.id for a in scene.aoes] == ["keep"]
        assert scene.aoes[0].source_action_id is None

    def test_executed_forced_false(self) -> None:
        payload = {
            "actions": [
                {
                    "id": "a",
                    "atMs": 500,
                    "executed": True,
                    "payload": {"shape": "sector", "shapeParams": {"radius": 10, "angle": 30}},
                }
            ]
        }
        action = decode_scene(payload, IdGenerator()).actions[0]
        assert action.executed is False
        assert action.payload == ActionPayload(params=SectorParams(radius=10, angle=30))

    def test_bad_numbers_use_fallbacks(self) -> None:
        payload = {
            "timelineDurationMs": "soon",
            "aoes": [{"id": "a", "shape": "circle", "rotation": "x", "timing": {"durationMs": None}}],
        }
        scene = decode_scene(payload, IdGenerator())
        assert scene.timeline_duration_ms == 120000
        assert scene.aoes[0].rotation == 0
        assert scene.aoes[0].timing.duration_ms == 4000

    def test_unsorted_points_sorted(self) -> None:
        payload = {
            "entities": [
                {
                    "id": "e",
                    "type": "player",
                    "motion": {
                        "kind": "path",
                        "points": [{"x": 1, "y": 1, "atMs": 900}, {"x": 0, "y": 0, "atMs": 100}],
                    },
                }
            ]
        }
        motion = decode_scene(payload, IdGenerator()).entities[0].motion
        assert [p.at_ms for p in motion.points] == [100, 900]

    def test_missing_ids_generated(self) -> None:
        scene = decode_scene({"entities": [{"type": "marker"}]}, IdGenerator(prefix="gen"))
        assert scene.entities[0].id == "gen_1"
        assert scene.entities[0].text == "1"


    def test_explicit_ids_reserved_before_generating(self) -> None:
        payload = {"entities": [{"type": "boss"}, {"id": "id_1", "type": "player"}]}
        scene = decode_scene(payload, IdGenerator())
        assert [e.id for e in scene.entities] == ["id_2", "id_1"]

    def test_null_sections_treated_as_missing(self) -> None:
        scene = loads('{"aoes": null, "actions": null}', IdGenerator())
        assert scene.aoes == ()
        assert scene.actions == ()

    def test_motion_flags_require_booleans(self) -> None:
        payload = {
            "entities": [
                {
                    "id": "e",
                    "type": "boss",
                    "motion": {"kind": "path", "loop": "false", "alignRotation": True},
                }
            ]
        }
        motion = decode_scene(payload, IdGenerator()).entities[0].motion
        assert motion.loop is False
        assert motion.align_rotation is True


class TestApply:
    def test_resets_clock_and_selection(self) -> None:
        doc = replace(
            _scene_doc(),
            playing=True,
            selection=Selection("entity", "m"),
        )
        scene = loads("{}", IdGenerator())
        applied = apply_scene(doc, scene)
        assert applied.simulation_time_ms == 0
        assert applied.playing is False
        assert applied.selection is None
        assert applied.entities == scene.entities

    def test_actions_unfired_after_apply(self) -> None:
        scene = loads(dumps(_scene_doc()), IdGenerator())
        applied = apply_scene(Document(), scene)
        assert all(not a.executed for a in applied.actions)
        assert isinstance(applied.actions[0], BossAction)
