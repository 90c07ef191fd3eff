"""Editor - one open document with its clock, reducers, and scene I/O."""
from __future__ import annotations

from typing import Any, Callable

from loguru import logger

from telegraph import document as ops
from telegraph.config import EditorConfig
from telegraph.ids import IdGenerator
from telegraph.store import DocumentStore
from telegraph.types import (
    AoEShape,
    Document,
    EntityType,
    SceneImportError,
    ToolMode,
    Vec2,
)
from telegraph_clock.frames import FrameSource, ManualFrames
from telegraph_clock.scrubber import Scrubber
from telegraph_editor.frame import RenderFrame, build_frame
from telegraph_schedule.scheduler import TimeValue, refire, set_timeline_duration
from telegraph_scene.codec import apply_scene, dumps, export_scene, loads
from telegraph_scene.defaults import new_document


class Editor:
    """Editing session over a single document.

    Wraps a :class:`DocumentStore` and a :class:`Scrubber`. All edits go
    through pure reducers; the editor only supplies the id generator and
    configuration, and re-reconciles actions after action edits so the
    derived AoEs always match the clock.
    """

    def __init__(
        self,
        config: EditorConfig | None = None,
        ids: IdGenerator | None = None,
        frames: FrameSource | None = None,
        document: Document | None = None,
    ) -> None:
        self._config = config or EditorConfig()
        ids = ids or IdGenerator(self._config.id_prefix)
        if document is None:
            document = new_document(ids, self._config)
        self._store = DocumentStore(document, ids)
        self._frames = frames if frames is not None else ManualFrames()
        self._scrubber = Scrubber(
            self._store, self._frames, auto_pause_at_end=self._config.auto_pause_at_end
        )

    @property
    def config(self) -> EditorConfig:
        return self._config

    @property
    def store(self) -> DocumentStore:
        return self._store

    @property
    def scrubber(self) -> Scrubber:
        return self._scrubber

    @property
    def document(self) -> Document:
        return self._store.state

    @property
    def ids(self) -> IdGenerator:
        return self._store.ids

    def subscribe(self, listener: Callable[[Document, Document], None]) -> Callable[[], None]:
        return self._store.subscribe(listener)

    # --- Clock ---

    def play(self) -> None:
        self._scrubber.play()

    def pause(self) -> None:
        self._scrubber.pause()

    def scrub(self, value: TimeValue) -> Document:
        return self._scrubber.scrub(value)

    def reset_simulation(self) -> Document:
        return self._scrubber.reset()

    def set_timeline_duration(self, duration_ms: float) -> Document:
        return self._store.dispatch(set_timeline_duration, duration_ms)

    # --- Selection / tools ---

    def set_tool_mode(self, mode: ToolMode) -> Document:
        return self._store.dispatch(ops.set_tool_mode, mode)

    def select_entity(self, entity_id: str) -> Document:
        return self._store.dispatch(ops.select_entity, entity_id)

    def select_aoe(self, aoe_id: str) -> Document:
        return self._store.dispatch(ops.select_aoe, aoe_id)

    def clear_selection(self) -> Document:
        return self._store.dispatch(ops.clear_selection)

    def delete_selected(self) -> Document:
        return self._store.dispatch(ops.delete_selected)

    def duplicate_selected(self) -> Document:
        return self._store.dispatch(
            ops.duplicate_selected, self.ids, offset=self._config.duplicate_offset
        )

    # --- Entities ---

    def place_entity(self, entity_type: EntityType, position: Vec2) -> Document:
        return self._store.dispatch(ops.add_entity, self.ids, entity_type, position)

    def update_entity(self, entity_id: str, **changes: Any) -> Document:
        return self._store.dispatch(ops.update_entity, entity_id, **changes)

    def delete_entity(self, entity_id: str) -> Document:
        return self._store.dispatch(ops.delete_entity, entity_id)

    def drag_entity(self, entity_id: str, position: Vec2) -> Document:
        return self._store.dispatch(
            ops.drag_entity,
            entity_id,
            position,
            tolerance_ms=self._config.keyframe_tolerance_ms,
        )

    def add_keyframe_at_time(self, entity_id: str) -> Document:
        return self._store.dispatch(ops.add_keyframe_at_time, entity_id)

    def update_keyframe(self, entity_id: str, index: int, **fields: float) -> Document:
        return self._store.dispatch(ops.update_entity_keyframe, entity_id, index, **fields)

    def remove_keyframe(self, entity_id: str, index: int) -> Document:
        return self._store.dispatch(ops.remove_entity_keyframe, entity_id, index)

    def set_motion(self, entity_id: str, motion: Any) -> Document:
        return self._store.dispatch(ops.set_entity_motion, entity_id, motion)

    def set_motion_kind(self, entity_id: str, kind: str) -> Document:
        return self._store.dispatch(ops.set_entity_motion_kind, entity_id, kind)

    def set_loop(self, entity_id: str, loop: bool) -> Document:
        return self._store.dispatch(ops.set_entity_loop, entity_id, loop)

    # --- AoEs ---

    def place_aoe(self, shape: AoEShape, position: Vec2) -> Document:
        return self._store.dispatch(
            ops.add_aoe,
            self.ids,
            shape,
            position,
            duration_ms=self._config.aoe_duration_ms,
        )

    def update_aoe(self, aoe_id: str, **changes: Any) -> Document:
        return self._store.dispatch(ops.update_aoe, aoe_id, **changes)

    def delete_aoe(self, aoe_id: str) -> Document:
        return self._store.dispatch(ops.delete_aoe, aoe_id)

    # --- Arena ---

    def update_arena(self, **changes: Any) -> Document:
        return self._store.dispatch(ops.update_arena, **changes)

    # --- Actions ---

    def add_action(self) -> Document:
        self._store.dispatch(
            ops.add_action,
            self.ids,
            lead_ms=self._config.action_lead_ms,
            duration_ms=self._config.action_duration_ms,
        )
        return self._store.dispatch(refire)

    def update_action(self, action_id: str, **changes: Any) -> Document:
        self._store.dispatch(ops.update_action, action_id, **changes)
        return self._store.dispatch(refire)

    def remove_action(self, action_id: str) -> Document:
        return self._store.dispatch(ops.remove_action, action_id)

    # --- Scene I/O ---

    def export_scene(self) -> dict[str, Any]:
        return export_scene(self.document)

    def export_json(self, indent: int | None = 2) -> str:
        doc = self.document
        logger.info(
            f"Scene exported: {len(doc.entities)} entities, {len(doc.actions)} actions"
        )
        return dumps(doc, indent=indent)

    def import_json(self, raw: str | bytes) -> bool:
        """Replace the document with a scene payload.

        Returns False and leaves the document untouched when the payload is
        rejected. On success the clock restarts at zero, paused.
        """
        try:
            scene = loads(raw, self.ids)
        except SceneImportError as exc:
            logger.warning(f"Scene import rejected: {exc}")
            return False
        self._scrubber.stop()
        for ident in (
            *(e.id for e in scene.entities),
            *(a.id for a in scene.aoes),
            *(a.id for a in scene.actions),
        ):
            self.ids.observe(ident)
        self._store.dispatch(apply_scene, scene)
        logger.info(
            f"Scene imported: {len(scene.entities)} entities, "
            f"{len(scene.aoes)} aoes, {len(scene.actions)} actions"
        )
        return True

    # --- Rendering ---

    def frame(self) -> RenderFrame:
        return build_frame(self.document, self._config.keyframe_tolerance_ms)
