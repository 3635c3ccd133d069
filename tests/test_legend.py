"""Unit tests for figtex.svg.legend.

Coverage: quadrilateral detection with svg.path, host to document mapping,
legend box rewrite with padding, and content shifting.
"""

from __future__ import annotations

from figtex.labels.catalog import BoundingBox, LabelCatalog, LabelRecord
from figtex.svg.document import CanvasSize, VectorDocument
from figtex.svg.legend import (
    LegendSnapshot,
    QuadrilateralLegendAdapter,
    correct_legends,
    host_to_document,
    path_quadrilateral,
)

FILL = '<g style="fill:white;"><path d="M325 60 L390 60 L390 100 L325 100 Z" style="stroke:none;"/></g>'
BORDER = '<g style="fill:none; stroke:black;"><path d="M325 60 L390 60 L390 100 L325 100 Z"/></g>'
ICON = '<g style="stroke:blue;"><path d="M329 72 L339 72" style="fill:none;"/></g>'
ENTRY = '<g transform="translate(343,72)"><text x="0" y="11.2">Velocity</text></g>'


def legend_document() -> VectorDocument:
    return VectorDocument(
        [
            '<svg xmlns="http://www.w3.org/2000/svg" width="400pt" height="300pt">',
            FILL,
            ICON,
            ENTRY,
            BORDER,
            "</svg>",
        ]
    )


def legend_catalog() -> LabelCatalog:
    catalog = LabelCatalog()
    record = catalog.add(LabelRecord(placeholder="Velocity...", original_text="Velocity", group=0))
    record.line_indices.append(3)
    return catalog


class TestPathQuadrilateral:
    """Test path_quadrilateral on legend-like paths."""

    def test_closed_rectangle(self) -> None:
        box = path_quadrilateral("M10 20 L60 20 L60 60 L10 60 Z")
        assert box == BoundingBox(10.0, 20.0, 50.0, 40.0)

    def test_relative_commands(self) -> None:
        box = path_quadrilateral("m10 20 h50 v40 h-50 z")
        assert box == BoundingBox(10.0, 20.0, 50.0, 40.0)

    def test_open_polyline_rejected(self) -> None:
        assert path_quadrilateral("M10 20 L60 20") is None

    def test_triangle_rejected(self) -> None:
        assert path_quadrilateral("M0 0 L10 0 L5 8 Z") is None

    def test_rotated_square_rejected(self) -> None:
        assert path_quadrilateral("M5 0 L10 5 L5 10 L0 5 Z") is None


class TestHostToDocument:
    """Test the host (bottom-left origin) to document mapping."""

    def test_same_units(self) -> None:
        box = host_to_document(BoundingBox(340, 200, 50, 40), (400, 300), CanvasSize(400, 300, "pt"))
        assert box == BoundingBox(340.0, 60.0, 50.0, 40.0)

    def test_scaled_canvas(self) -> None:
        box = host_to_document(BoundingBox(340, 200, 50, 40), (400, 300), CanvasSize(800, 600))
        assert box == BoundingBox(680.0, 120.0, 100.0, 80.0)


class TestQuadrilateralLegendAdapter:
    """Test legend correction on a retokenized document."""

    def test_box_rewritten_and_content_shifted(self) -> None:
        document = legend_document()
        snapshot = LegendSnapshot(
            group=0,
            desired=BoundingBox(340, 200, 50, 40),
            exported=BoundingBox(325, 200, 65, 40),
            host_canvas=(400, 300),
        )

        correction = QuadrilateralLegendAdapter().correct(
            document, snapshot, legend_catalog(), (1, 1, 1, 1)
        )

        assert correction is not None
        assert correction.box_lines == [1, 4]
        assert (correction.dx, correction.dy) == (15.0, 0.0)
        assert document.lines == [
            '<svg xmlns="http://www.w3.org/2000/svg" width="400pt" height="300pt">',
            FILL.replace("M325 60 L390 60 L390 100 L325 100 Z", "M339 59 L391 59 L391 101 L339 101 Z"),
            '<g transform="translate(15,0)">',
            ICON,
            ENTRY,
            "</g>",
            BORDER.replace("M325 60 L390 60 L390 100 L325 100 Z", "M339 59 L391 59 L391 101 L339 101 Z"),
            "</svg>",
        ]
        assert document.check_well_formed() is None

    def test_padding_in_pixels(self) -> None:
        """Padding is given in points and scaled for px canvases."""
        document = legend_document()
        document.lines[0] = '<svg xmlns="http://www.w3.org/2000/svg" width="400" height="300">'
        snapshot = LegendSnapshot(
            group=0,
            desired=BoundingBox(325, 200, 65, 40),
            host_canvas=(400, 300),
        )
        QuadrilateralLegendAdapter().correct(document, snapshot, legend_catalog(), (3, 3, 3, 3))
        assert 'd="M321 56 L394 56 L394 104 L321 104 Z"' in document.lines[1]

    def test_horizontal_legend_untouched(self) -> None:
        document = legend_document()
        before = list(document.lines)
        snapshot = LegendSnapshot(
            group=0,
            desired=BoundingBox(340, 200, 50, 40),
            host_canvas=(400, 300),
            vertical=False,
        )
        assert QuadrilateralLegendAdapter().correct(document, snapshot, legend_catalog(), (1, 1, 1, 1)) is None
        assert document.lines == before

    def test_no_matching_box(self) -> None:
        document = legend_document()
        before = list(document.lines)
        snapshot = LegendSnapshot(
            group=0,
            desired=BoundingBox(10, 10, 20, 20),
            host_canvas=(400, 300),
        )
        assert correct_legends(document, [snapshot], legend_catalog()) == []
        assert document.lines == before

    def test_view_box_canvas_in_pixels(self) -> None:
        """A 768px canvas showing a 576-unit viewBox maps host points 1:1."""
        box_d = "M500 92 L560 92 L560 132 L500 132 Z"
        document = VectorDocument(
            [
                '<svg xmlns="http://www.w3.org/2000/svg" width="768px" height="576px" viewBox="0 0 576 432">',
                f'<g style="fill:none; stroke:black;"><path d="{box_d}"/></g>',
                "</svg>",
            ]
        )
        snapshot = LegendSnapshot(group=0, desired=BoundingBox(500, 300, 60, 40), host_canvas=(576, 432))

        correction = QuadrilateralLegendAdapter().correct(document, snapshot, LabelCatalog(), (1, 1, 1, 1))

        assert correction is not None
        assert correction.box_lines == [1]
        assert 'd="M499 91 L561 91 L561 133 L499 133 Z"' in document.lines[1]
