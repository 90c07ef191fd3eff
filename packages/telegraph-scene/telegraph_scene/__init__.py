"""telegraph-scene - JSON import/export and default scenes."""
from __future__ import annotations

from telegraph_scene.codec import Scene, apply_scene, decode_scene, dumps, export_scene, loads
from telegraph_scene.defaults import DEFAULT_ARENA, default_actions, default_entities, new_document

__all__ = [
    "DEFAULT_ARENA",
    "Scene",
    "apply_scene",
    "decode_scene",
    "default_actions",
    "default_entities",
    "dumps",
    "export_scene",
    "loads",
    "new_document",
]
