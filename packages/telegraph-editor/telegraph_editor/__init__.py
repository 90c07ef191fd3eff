"""telegraph-editor - Editing session facade tying store, clock, and scene I/O."""
from __future__ import annotations

from telegraph_editor.editor import Editor
from telegraph_editor.frame import EntityView, KeyframeHandle, RenderFrame, build_frame, visible_aoes

__all__ = [
    "Editor",
    "EntityView",
    "KeyframeHandle",
    "RenderFrame",
    "build_frame",
    "visible_aoes",
]
