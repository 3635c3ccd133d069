"""Line-oriented SVG document model."""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import NamedTuple

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

SVG_OPEN_TAG = re.compile(r"<svg\b[^>]*>", re.DOTALL)
_LENGTH = re.compile(r"^\s*([-+]?\d*\.?\d+(?:[eE][-+]?\d+)?)\s*([a-z%]*)\s*$", re.IGNORECASE)

PX_PER_PT = 96.0 / 72.0

# Points per unit for absolute CSS lengths; unitless lengths are px.
POINTS_PER_UNIT = {
    "": 72.0 / 96.0,
    "px": 72.0 / 96.0,
    "pt": 1.0,
    "pc": 12.0,
    "in": 72.0,
    "cm": 72.0 / 2.54,
    "mm": 72.0 / 25.4,
}


class CanvasSize(NamedTuple):
    """Canvas extent in the user units that path and rect coordinates use.

    With a viewBox, ``width`` and ``height`` come from it and ``unit`` is the
    unit of the root ``width`` attribute. ``units_per_point`` is then derived
    from the ratio of viewBox width to declared width.
    """

    width: float
    height: float
    unit: str = ""
    units_per_point: float | None = None

    @property
    def points_to_units(self) -> float:
        """Document units per typographic point."""
        if self.units_per_point is not None:
            return self.units_per_point
        return 1.0 if self.unit == "pt" else PX_PER_PT


def get_attribute(markup: str, name: str) -> str | None:
    """Value of attribute ``name`` in a tag fragment, or None."""
    match = re.search(
        r"(?<![\w:-])" + re.escape(name) + r"\s*=\s*([\"'])(.*?)\1", markup, re.DOTALL
    )
    return match.group(2) if match else None


def parse_length(value: str | None) -> tuple[float, str] | None:
    """Split an SVG length such as ``"420pt"`` into (420.0, "pt")."""
    if value is None:
        return None
    match = _LENGTH.match(value)
    if not match:
        return None
    return float(match.group(1)), match.group(2).lower()


class VectorDocument:
    """Ordered sequence of logical lines of one SVG file.

    Each line holds one balanced element span as produced by retokenize().
    Reconciliation stages mutate ``lines`` in place.
    """

    def __init__(self, lines: list[str] | None = None) -> None:
        self.lines: list[str] = lines if lines is not None else []

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)

    def __getitem__(self, index: int) -> str:
        return self.lines[index]

    def serialize(self) -> str:
        return "\n".join(self.lines) + "\n"

    def canvas_size(self) -> CanvasSize | None:
        """Canvas extent of the root ``<svg>`` element in user units.

        The viewBox wins when present; otherwise width/height are used as
        declared.
        """
        for line in self.lines:
            match = SVG_OPEN_TAG.search(line)
            if match:
                return _canvas_from_tag(match.group(0))
        return None

    def check_well_formed(self) -> str | None:
        """Parse the serialized document; return the parser error, if any."""
        try:
            ET.fromstring(self.serialize().encode("utf-8"))
        except (ET.ParseError, DefusedXmlException) as e:
            return str(e)
        return None


def _view_box(tag: str) -> tuple[float, float] | None:
    view_box = get_attribute(tag, "viewBox")
    if not view_box:
        return None
    parts = re.split(r"[\s,]+", view_box.strip())
    if len(parts) != 4:
        return None
    try:
        width, height = float(parts[2]), float(parts[3])
    except ValueError:
        return None
    if width <= 0 or height <= 0:
        return None
    return width, height


def _canvas_from_tag(tag: str) -> CanvasSize | None:
    width = parse_length(get_attribute(tag, "width"))
    height = parse_length(get_attribute(tag, "height"))
    view_box = _view_box(tag)

    if view_box is not None:
        unit = width[1] if width else ""
        units_per_point = None
        if width and unit in POINTS_PER_UNIT and width[0] > 0:
            units_per_point = view_box[0] / (width[0] * POINTS_PER_UNIT[unit])
        return CanvasSize(view_box[0], view_box[1], unit, units_per_point)

    if width and height and width[1] != "%" and height[1] != "%":
        return CanvasSize(width[0], height[0], width[1])
    return None
