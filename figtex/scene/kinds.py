"""Per-kind accessors for scene elements.

Each ElementKind maps to a KindHandlers tuple of plain functions taking the
SceneElement. The mutator never inspects host objects directly; adding a
new kind means adding one entry to HANDLERS.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, NamedTuple

from figtex.labels.catalog import (
    ANCHOR_FOR_ALIGNMENT,
    DEFAULT_COLOR,
    RGB,
    Alignment,
    Anchor,
    ElementKind,
)
from figtex.scene.base import SceneElement

DEFAULT_FONT_SIZE = 10.0

HORIZONTAL_ALIGNMENTS = {
    "left": Alignment.START,
    "center": Alignment.CENTER,
    "right": Alignment.END,
}

# Vertical alignment of a constant-line label drawn along a horizontal line.
# Labels of vertical lines are rotated, so the mapping is reversed.
VERTICAL_ANCHORS = {
    "top": Anchor.START,
    "middle": Anchor.MIDDLE,
    "bottom": Anchor.END,
}
_REVERSED_ANCHORS = {Anchor.START: Anchor.END, Anchor.MIDDLE: Anchor.MIDDLE, Anchor.END: Anchor.START}


class KindHandlers(NamedTuple):
    extract_text: Callable[[SceneElement], Any]
    extract_font_size: Callable[[SceneElement], float]
    extract_color: Callable[[SceneElement], RGB]
    compute_alignment: Callable[[SceneElement], Alignment]
    compute_anchor: Callable[[SceneElement], Anchor]
    apply_mutation: Callable[[SceneElement, str], None]


def _text(element: SceneElement) -> Any:
    return element.read()


def _font_size(element: SceneElement) -> float:
    size = getattr(element.owner, "font_size", None)
    return float(size) if size else DEFAULT_FONT_SIZE


def _color(element: SceneElement) -> RGB:
    color = getattr(element.owner, "color", None)
    if color is None:
        return DEFAULT_COLOR
    return tuple(float(c) for c in color)


def _write(element: SceneElement, text: str) -> None:
    element.write(text)


def _fixed(alignment: Alignment) -> Callable[[SceneElement], Alignment]:
    return lambda element: alignment


def _matching_anchor(compute_alignment: Callable[[SceneElement], Alignment]):
    return lambda element: ANCHOR_FOR_ALIGNMENT[compute_alignment(element)]


# ---------------------------------------------------------------------------
# Alignment rules
# ---------------------------------------------------------------------------


def plain_text_alignment(element: SceneElement) -> Alignment:
    value = str(getattr(element.owner, "horizontal_alignment", "left")).lower()
    return HORIZONTAL_ALIGNMENTS.get(value, Alignment.START)


def axis_tick_alignment(element: SceneElement) -> Alignment:
    """x ticks are centred under their tick; y ticks hug the axis line."""
    if element.attribute.startswith("x"):
        return Alignment.CENTER
    if element.attribute.startswith("y"):
        location = str(getattr(element.owner, "y_axis_location", "left")).lower()
        return Alignment.START if location == "right" else Alignment.END
    return Alignment.END


def colorbar_tick_alignment(element: SceneElement) -> Alignment:
    owner = element.owner
    inside = str(getattr(owner, "axis_location", "out")).lower() == "in"
    east = str(getattr(owner, "location", "east")).lower() == "east"
    # Labels sit right of the bar for an outside east bar or an inside west bar.
    labels_on_right = inside != east
    return Alignment.START if labels_on_right else Alignment.END


def constant_line_anchor(element: SceneElement) -> Anchor:
    owner = element.owner
    value = str(getattr(owner, "label_vertical_alignment", "top")).lower()
    anchor = VERTICAL_ANCHORS.get(value, Anchor.START)
    if str(getattr(owner, "intercept_axis", "y")).lower() == "x":
        anchor = _REVERSED_ANCHORS[anchor]
    return anchor


def _handlers(
    compute_alignment: Callable[[SceneElement], Alignment],
    compute_anchor: Callable[[SceneElement], Anchor] | None = None,
) -> KindHandlers:
    return KindHandlers(
        extract_text=_text,
        extract_font_size=_font_size,
        extract_color=_color,
        compute_alignment=compute_alignment,
        compute_anchor=compute_anchor or _matching_anchor(compute_alignment),
        apply_mutation=_write,
    )


HANDLERS: dict[ElementKind, KindHandlers] = {
    ElementKind.PLAIN_TEXT: _handlers(plain_text_alignment),
    ElementKind.LEGEND_ENTRY: _handlers(_fixed(Alignment.START)),
    ElementKind.AXIS_TICK: _handlers(axis_tick_alignment),
    ElementKind.COLORBAR_TICK: _handlers(colorbar_tick_alignment),
    ElementKind.CONSTANT_LINE_LABEL: _handlers(_fixed(Alignment.CENTER), constant_line_anchor),
    ElementKind.AXIS_EXPONENT: _handlers(_fixed(Alignment.AUTO)),
}


def handlers_for(kind: ElementKind | str) -> KindHandlers:
    return HANDLERS[ElementKind(kind)]
