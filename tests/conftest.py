"""Pytest configuration and shared fixtures for figtex tests."""

from __future__ import annotations

from collections.abc import Callable
from xml.sax.saxutils import escape

import pytest

from figtex.config import Config
from figtex.labels.catalog import BoundingBox, ElementKind
from figtex.scene import Figure, Legend, Text

CANVAS_WIDTH = 400.0
CANVAS_HEIGHT = 300.0
LEGEND_RIGHT = 390.0
LEGEND_BOTTOM = 200.0


def legend_width(strings: list[str]) -> float:
    return 10.0 + 5.0 * max((len(s) for s in strings), default=0)


def fit_legends(figure: Figure) -> None:
    """Layout callback: legends grow leftwards from a fixed right edge."""
    for legend in figure.legends():
        if legend.position is None:
            continue
        width = legend_width(legend.strings)
        legend.position.x = LEGEND_RIGHT - width
        legend.position.width = width


def _quad(box: BoundingBox, height: float) -> str:
    x0, x1 = box.x, box.x + box.width
    y0 = height - box.y - box.height
    y1 = y0 + box.height
    return f"M{x0:g} {y0:g} L{x1:g} {y0:g} L{x1:g} {y1:g} L{x0:g} {y1:g} Z"


def _text_group(text: str, tx: float, ty: float, x: float = 0.0) -> str:
    # Batik breaks lines inside tags; keep one such break to exercise it.
    return (
        f'<g transform="translate({tx:g},{ty:g})" style="font-size:10px; fill:black;"\n'
        f'><text x="{x:g}" xml:space="preserve" y="0" style="stroke:none;"\n'
        f">{escape(text)}</text\n></g>"
    )


def render_figure(figure: Figure) -> str:
    """Minimal Batik-style SVG export of a Figure."""
    width, height = figure.width, figure.height
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width:g}pt" height="{height:g}pt"'
        f' viewBox="0 0 {width:g} {height:g}">',
        f'<g style="fill:white; stroke:white;"><rect x="0" y="0" width="{width:g}"'
        f' height="{height:g}" style="stroke:none;"/></g>',
    ]

    row = 0
    for element in figure.elements():
        if element.kind is ElementKind.LEGEND_ENTRY:
            continue
        text = element.read()
        if text:
            parts.append(_text_group(str(text), 40, 20 + 15 * row))
            row += 1

    for legend in figure.legends():
        box = legend.position
        parts.append(f'<g style="fill:white;"><path d="{_quad(box, height)}" style="stroke:none;"/></g>')
        top = height - box.y - box.height
        for i, entry in enumerate(legend.strings):
            y = top + 12 + 14 * i
            parts.append(
                f'<g style="stroke:rgb(0,114,189);"><path d="M{box.x + 4:g} {y:g} L{box.x + 14:g} {y:g}"'
                f' style="fill:none;"/></g>'
            )
            parts.append(_text_group(entry, box.x + 18, y))
        parts.append(
            f'<g style="fill:none; stroke:black;"><path d="{_quad(box, height)}"/></g>'
        )

    parts.append("</svg>")
    return "\n".join(parts) + "\n"


@pytest.fixture
def make_figure() -> Callable[..., Figure]:
    """Factory for figures exported by render_figure()."""

    def factory(texts: list[Text] | None = None, legend: list[str] | None = None, **kwargs) -> Figure:
        legends = []
        if legend is not None:
            legends.append(
                Legend(
                    strings=list(legend),
                    font_size=10.0,
                    position=BoundingBox(
                        LEGEND_RIGHT - legend_width(legend), LEGEND_BOTTOM, legend_width(legend), 40.0
                    ),
                )
            )
        return Figure(
            width=CANVAS_WIDTH,
            height=CANVAS_HEIGHT,
            exporter=render_figure,
            layout=fit_legends,
            texts=texts or [],
            legend_objects=legends,
            **kwargs,
        )

    return factory


@pytest.fixture
def svg_only_config() -> Config:
    """Config that never touches the backend."""
    return Config(export_pdf=False)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's FIGTEX_INKSCAPE out of the tests."""
    monkeypatch.delenv("FIGTEX_INKSCAPE", raising=False)


@pytest.fixture
def simple_svg_content() -> str:
    """Return a small exported SVG with one placeholder text node."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" width="200pt" height="100pt" viewBox="0 0 200 100">
<g style="fill:white;"><rect x="0" y="0" width="200" height="100"/></g>
<g transform="translate(20,30)"><text x="0" y="0" style="font-family:Helvetica;">Velocity</text></g>
</svg>
"""
