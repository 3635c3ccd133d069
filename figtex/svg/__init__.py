"""SVG reconciliation for figtex.

This subpackage provides:
- Retokenization of exporter output into one element per line
- Matching of text nodes against the label catalog
- Anchor and baseline resolution for restored labels
- Legend box correction and page background removal
"""

from figtex.svg.anchor import LinearWidthEstimator, WidthEstimator, resolve_auto_anchor, y_offset
from figtex.svg.background import remove_white_background
from figtex.svg.document import CanvasSize, VectorDocument
from figtex.svg.legend import (
    LegendSnapshot,
    QuadrilateralLegendAdapter,
    correct_legends,
)
from figtex.svg.matcher import ReconcileReport, TextNodeMatcher, reconcile
from figtex.svg.retokenizer import retokenize, split_lines

__all__ = [
    "LinearWidthEstimator",
    "WidthEstimator",
    "resolve_auto_anchor",
    "y_offset",
    "remove_white_background",
    "CanvasSize",
    "VectorDocument",
    "LegendSnapshot",
    "QuadrilateralLegendAdapter",
    "correct_legends",
    "ReconcileReport",
    "TextNodeMatcher",
    "reconcile",
    "retokenize",
    "split_lines",
]
