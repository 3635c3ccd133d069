"""Unit tests for figtex.svg.document."""

from __future__ import annotations

import pytest

from figtex.svg.document import CanvasSize, VectorDocument


def canvas_of(root: str) -> CanvasSize | None:
    return VectorDocument([root, "</svg>"]).canvas_size()


class TestCanvasSize:
    """Test canvas extent and point conversion of the root element."""

    def test_points_without_view_box(self) -> None:
        canvas = canvas_of('<svg width="400pt" height="300pt">')
        assert (canvas.width, canvas.height) == (400.0, 300.0)
        assert canvas.points_to_units == 1.0

    def test_pixels_without_view_box(self) -> None:
        canvas = canvas_of('<svg width="400" height="300">')
        assert canvas.points_to_units == pytest.approx(96.0 / 72.0)

    @pytest.mark.parametrize("width, height", [("8in", "6in"), ("768px", "576px"), ("768", "576")])
    def test_view_box_gives_user_units(self, width: str, height: str) -> None:
        """Geometry follows the viewBox whatever unit the root width is in."""
        canvas = canvas_of(f'<svg width="{width}" height="{height}" viewBox="0 0 576 432">')
        assert (canvas.width, canvas.height) == (576.0, 432.0)
        assert canvas.points_to_units == pytest.approx(1.0)

    def test_scaled_view_box(self) -> None:
        """A 4in canvas (288pt) showing 576 user units has 2 units per point."""
        canvas = canvas_of('<svg width="4in" height="3in" viewBox="0 0 576 432">')
        assert canvas.points_to_units == pytest.approx(2.0)

    def test_percent_width_uses_view_box(self) -> None:
        canvas = canvas_of('<svg width="100%" height="100%" viewBox="0,0,200,100">')
        assert (canvas.width, canvas.height) == (200.0, 100.0)
        assert canvas.points_to_units == pytest.approx(96.0 / 72.0)

    def test_no_size(self) -> None:
        assert canvas_of("<svg>") is None


class TestWellFormed:
    """Test check_well_formed."""

    def test_valid(self) -> None:
        assert VectorDocument(["<svg>", "<g/>", "</svg>"]).check_well_formed() is None

    def test_unbalanced(self) -> None:
        assert VectorDocument(["<svg>", "<g>", "</svg>"]).check_well_formed() is not None
