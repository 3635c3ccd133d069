"""Swapping scene text for placeholders and back.

SceneMutator is used in three steps around the host export::

    mutator = SceneMutator(scene, registry)
    catalog = mutator.populate()
    try:
        mutator.apply()
        markup = scene.export_svg()
    finally:
        mutator.restore()
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from figtex.labels.catalog import BoundingBox, ElementKind, LabelCatalog, LabelRecord
from figtex.labels.registry import LabelMode, LabelRegistry
from figtex.scene.base import SceneElement, SceneSource
from figtex.scene.kinds import HANDLERS, KindHandlers
from figtex.svg.legend import LegendSnapshot

logger = logging.getLogger(__name__)


class SceneMutator:
    """Registers every label of a scene and pushes placeholders into it.

    Args:
        scene: The host figure.
        registry: Registry for this run; its catalog receives the records.
        label_mode: Placeholder mode for ordinary labels.
        legend_label_mode: Placeholder mode for the first entry of a legend.
        handlers: Kind dispatch table, HANDLERS by default.
    """

    def __init__(
        self,
        scene: SceneSource,
        registry: LabelRegistry,
        *,
        label_mode: LabelMode = LabelMode.SANITIZE,
        legend_label_mode: LabelMode = LabelMode.PADDED,
        handlers: dict[ElementKind, KindHandlers] | None = None,
    ) -> None:
        self.scene = scene
        self.registry = registry
        self.label_mode = LabelMode(label_mode)
        self.legend_label_mode = LabelMode(legend_label_mode)
        self.handlers = handlers if handlers is not None else HANDLERS
        self.snapshots: list[LegendSnapshot] = []
        self._assignments: list[tuple[SceneElement, Any, str]] = []
        self._applied = False

    @property
    def catalog(self) -> LabelCatalog:
        return self.registry.catalog

    def _mode_for(self, element: SceneElement) -> LabelMode:
        if element.kind is ElementKind.LEGEND_ENTRY and element.index == 0:
            return self.legend_label_mode
        return self.label_mode

    def populate(self) -> LabelCatalog:
        """Register every non-empty label and snapshot legend boxes."""
        for element in self.scene.elements():
            handlers = self.handlers[element.kind]
            original = handlers.extract_text(element)
            if original is None or not str(original).strip():
                continue

            text = str(original)
            placeholder = self.registry.register(text, self._mode_for(element))
            hint = getattr(element.owner, "position", None)
            self.catalog.add(
                LabelRecord(
                    placeholder=placeholder,
                    original_text=text,
                    kind=element.kind,
                    font_size=handlers.extract_font_size(element),
                    color=handlers.extract_color(element),
                    alignment=handlers.compute_alignment(element),
                    anchor=handlers.compute_anchor(element),
                    geometry_hint=copy.copy(hint) if isinstance(hint, BoundingBox) else None,
                    group=element.group,
                )
            )
            self._assignments.append((element, original, placeholder))

        host_canvas = tuple(self.scene.canvas_size())
        for group, legend in enumerate(self.scene.legends()):
            position = getattr(legend, "position", None)
            if position is None:
                continue
            self.snapshots.append(
                LegendSnapshot(
                    group=group,
                    desired=copy.copy(position),
                    host_canvas=host_canvas,
                    vertical=str(getattr(legend, "orientation", "vertical")).lower() == "vertical",
                    boxed=bool(getattr(legend, "box", True)),
                )
            )

        logger.debug(
            "Registered %d label(s), %d legend snapshot(s)", len(self.catalog), len(self.snapshots)
        )
        return self.catalog

    def apply(self) -> None:
        """Write placeholders into the scene and let the host relayout."""
        self._applied = True
        for element, _original, placeholder in self._assignments:
            self.handlers[element.kind].apply_mutation(element, placeholder)
        self.scene.update_layout()

        legends = list(self.scene.legends())
        for snapshot in self.snapshots:
            position = getattr(legends[snapshot.group], "position", None)
            if position is not None:
                snapshot.exported = copy.copy(position)

    def restore(self) -> None:
        """Put the original strings back. Safe to call more than once."""
        if not self._applied:
            return
        for element, original, _placeholder in reversed(self._assignments):
            self.handlers[element.kind].apply_mutation(element, original)
        self.scene.update_layout()
        self._applied = False
