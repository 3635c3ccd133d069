"""Host scene access for figtex.

This subpackage provides:
- The SceneSource contract a host figure implements
- The per-kind dispatch table (text, alignment, anchor, mutation)
- A small in-memory figure model
- SceneMutator, which swaps labels for placeholders around export
"""

from figtex.scene.base import SceneElement, SceneSource
from figtex.scene.kinds import HANDLERS, KindHandlers, handlers_for
from figtex.scene.model import Axes, Colorbar, ConstantLine, Figure, Legend, Text
from figtex.scene.mutator import SceneMutator

__all__ = [
    "SceneElement",
    "SceneSource",
    "HANDLERS",
    "KindHandlers",
    "handlers_for",
    "Axes",
    "Colorbar",
    "ConstantLine",
    "Figure",
    "Legend",
    "Text",
    "SceneMutator",
]
