"""A small in-memory figure model implementing SceneSource.

Plotting front ends build a Figure from their own objects, hand it an
``exporter`` that renders the current state to SVG markup, and optionally a
``layout`` callback that recomputes legend boxes after text changed.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from figtex.labels.catalog import DEFAULT_COLOR, RGB, BoundingBox, ElementKind
from figtex.scene.base import SceneElement


@dataclass
class Text:
    """Free text: titles, axis labels, annotations."""

    string: str
    font_size: float = 10.0
    color: RGB = DEFAULT_COLOR
    horizontal_alignment: str = "left"
    position: BoundingBox | None = None


@dataclass
class Legend:
    strings: list[str] = field(default_factory=list)
    font_size: float = 9.0
    color: RGB = DEFAULT_COLOR
    orientation: str = "vertical"
    box: bool = True
    position: BoundingBox | None = None


@dataclass
class Axes:
    x_tick_labels: list[str] = field(default_factory=list)
    y_tick_labels: list[str] = field(default_factory=list)
    z_tick_labels: list[str] = field(default_factory=list)
    y_axis_location: str = "left"
    x_exponent: str | None = None
    y_exponent: str | None = None
    font_size: float = 10.0
    color: RGB = DEFAULT_COLOR


@dataclass
class Colorbar:
    tick_labels: list[str] = field(default_factory=list)
    location: str = "east"
    axis_location: str = "out"
    font_size: float = 10.0
    color: RGB = DEFAULT_COLOR


@dataclass
class ConstantLine:
    label: str
    value: float = 0.0
    intercept_axis: str = "y"
    label_vertical_alignment: str = "top"
    font_size: float = 10.0
    color: RGB = DEFAULT_COLOR


@dataclass
class Figure:
    """A host figure: its text-bearing objects plus export hooks.

    ``width`` and ``height`` are the canvas size in host units (points for
    most plotting libraries). Legend positions use the same units with the
    origin at the bottom-left corner.
    """

    width: float
    height: float
    exporter: Callable[[Figure], str]
    layout: Callable[[Figure], None] | None = None
    texts: list[Text] = field(default_factory=list)
    legend_objects: list[Legend] = field(default_factory=list)
    axes: list[Axes] = field(default_factory=list)
    colorbars: list[Colorbar] = field(default_factory=list)
    constant_lines: list[ConstantLine] = field(default_factory=list)

    def elements(self) -> Iterator[SceneElement]:
        for text in self.texts:
            yield SceneElement(ElementKind.PLAIN_TEXT, text, "string")

        for group, legend in enumerate(self.legend_objects):
            for index in range(len(legend.strings)):
                yield SceneElement(ElementKind.LEGEND_ENTRY, legend, "strings", index, group)

        for ax in self.axes:
            for attribute in ("x_tick_labels", "y_tick_labels", "z_tick_labels"):
                for index in range(len(getattr(ax, attribute))):
                    yield SceneElement(ElementKind.AXIS_TICK, ax, attribute, index)

        for colorbar in self.colorbars:
            for index in range(len(colorbar.tick_labels)):
                yield SceneElement(ElementKind.COLORBAR_TICK, colorbar, "tick_labels", index)

        for line in self.constant_lines:
            yield SceneElement(ElementKind.CONSTANT_LINE_LABEL, line, "label")

        for ax in self.axes:
            for attribute in ("x_exponent", "y_exponent"):
                if getattr(ax, attribute) is not None:
                    yield SceneElement(ElementKind.AXIS_EXPONENT, ax, attribute)

    def legends(self) -> list[Legend]:
        return self.legend_objects

    def canvas_size(self) -> tuple[float, float]:
        return (self.width, self.height)

    def update_layout(self) -> None:
        if self.layout is not None:
            self.layout(self)

    def export_svg(self) -> str:
        return self.exporter(self)
