"""Legend box correction.

The host lays the legend out around the placeholders, so the exported box
rarely fits the restored text. Before mutation the desired box is
snapshotted in host units; after export the matching quadrilateral path is
rewritten to that box and the legend content is shifted with it.

Only vertical legends with a visible border are corrected. The path shape
and nesting handled here are those of exporters that draw the legend box as
``M x0 y0 L x1 y0 L x1 y1 L x0 y1 Z`` on its own element; other exporters
can plug in their own LegendAdapter.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Protocol

from svg.path import Close, parse_path

from figtex.labels.catalog import BoundingBox, LabelCatalog
from figtex.svg.document import CanvasSize, VectorDocument
from figtex.svg.retokenizer import tag_events

logger = logging.getLogger(__name__)

PATH_D = re.compile(r"(<path\b[^>]*?\bd\s*=\s*)([\"'])(?P<d>.*?)\2", re.DOTALL)

DEFAULT_TOLERANCE = 2.0


@dataclass
class LegendSnapshot:
    """Legend geometry captured around scene mutation.

    Attributes:
        group: Legend index; matches LabelRecord.group of its entries.
        desired: Box with the original text, host units, origin bottom-left.
        exported: Box after placeholders were pushed, if the host reports it.
        host_canvas: Host canvas (width, height) the boxes refer to.
        vertical: Entries are stacked vertically.
        boxed: The legend draws a visible border.
    """

    group: int
    desired: BoundingBox
    host_canvas: tuple[float, float]
    exported: BoundingBox | None = None
    vertical: bool = True
    boxed: bool = True


@dataclass
class Quadrilateral:
    line_index: int
    box: BoundingBox


@dataclass
class LegendCorrection:
    group: int
    box_lines: list[int] = field(default_factory=list)
    shifted_lines: int = 0
    dx: float = 0.0
    dy: float = 0.0


class LegendAdapter(Protocol):
    def correct(
        self,
        document: VectorDocument,
        snapshot: LegendSnapshot,
        catalog: LabelCatalog,
        padding: tuple[float, float, float, float],
    ) -> LegendCorrection | None: ...


def _fmt(value: float) -> str:
    return f"{value + 0.0:.4f}".rstrip("0").rstrip(".")


def path_quadrilateral(d: str) -> BoundingBox | None:
    """Bounding box of a closed axis-aligned four-corner path, else None."""
    try:
        path = parse_path(d)
    except (ValueError, IndexError):
        return None

    segments = list(path)
    if not segments:
        return None

    closed = any(isinstance(seg, Close) for seg in segments)
    corners: list[tuple[float, float]] = []
    for seg in segments:
        point = (round(seg.end.real, 3), round(seg.end.imag, 3))
        if point not in corners:
            corners.append(point)
    if not closed:
        first = segments[0].end
        last = segments[-1].end
        closed = abs(first - last) < 1e-6
    if not closed or len(corners) != 4:
        return None

    xs = sorted({x for x, _ in corners})
    ys = sorted({y for _, y in corners})
    if len(xs) != 2 or len(ys) != 2:
        return None
    return BoundingBox(xs[0], ys[0], xs[1] - xs[0], ys[1] - ys[0])


def find_quadrilaterals(document: VectorDocument) -> list[Quadrilateral]:
    found = []
    for index, line in enumerate(document.lines):
        if "<path" not in line:
            continue
        for match in PATH_D.finditer(line):
            box = path_quadrilateral(match.group("d"))
            if box is not None:
                found.append(Quadrilateral(index, box))
    return found


def host_to_document(box: BoundingBox, host_canvas: tuple[float, float], canvas: CanvasSize) -> BoundingBox:
    """Map a host box (origin bottom-left) into document units (origin top-left)."""
    host_width, host_height = host_canvas
    scale = canvas.width / host_width
    return BoundingBox(
        box.x * scale,
        (host_height - box.y - box.height) * scale,
        box.width * scale,
        box.height * scale,
    )


def _box_error(a: BoundingBox, b: BoundingBox) -> float:
    return max(abs(a.x - b.x), abs(a.y - b.y), abs(a.width - b.width), abs(a.height - b.height))


def quadrilateral_d(box: BoundingBox) -> str:
    x0, y0 = _fmt(box.x), _fmt(box.y)
    x1, y1 = _fmt(box.x + box.width), _fmt(box.y + box.height)
    return f"M{x0} {y0} L{x1} {y0} L{x1} {y1} L{x0} {y1} Z"


def _balanced(lines: list[str]) -> bool:
    depth = 0
    for line in lines:
        for _, delta in tag_events(line):
            depth += delta
            if depth < 0:
                return False
    return depth == 0


class QuadrilateralLegendAdapter:
    """Legend correction for exporters drawing the box as a closed path."""

    def __init__(self, tolerance: float = DEFAULT_TOLERANCE) -> None:
        self.tolerance = tolerance

    def correct(
        self,
        document: VectorDocument,
        snapshot: LegendSnapshot,
        catalog: LabelCatalog,
        padding: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0),
    ) -> LegendCorrection | None:
        if not (snapshot.vertical and snapshot.boxed):
            logger.debug("Legend %d is horizontal or unboxed; left as exported", snapshot.group)
            return None

        canvas = document.canvas_size()
        if canvas is None or snapshot.host_canvas[0] <= 0:
            logger.info("No canvas size declared; legend %d left as exported", snapshot.group)
            return None

        desired = host_to_document(snapshot.desired, snapshot.host_canvas, canvas)
        expected = host_to_document(
            snapshot.exported or snapshot.desired, snapshot.host_canvas, canvas
        )

        quads = find_quadrilaterals(document)
        if not quads:
            logger.info("No quadrilateral paths found; legend %d left as exported", snapshot.group)
            return None

        best = min(quads, key=lambda q: _box_error(q.box, expected))
        if _box_error(best.box, expected) > self.tolerance:
            logger.info("No legend box within tolerance for legend %d", snapshot.group)
            return None
        exported = best.box
        box_lines = sorted(
            {q.line_index for q in quads if _box_error(q.box, exported) <= 0.5}
        )

        top, bottom, left, right = (p * canvas.points_to_units for p in padding)
        target = BoundingBox(
            desired.x - left,
            desired.y - top,
            desired.width + left + right,
            desired.height + top + bottom,
        )
        new_d = quadrilateral_d(target)
        for index in box_lines:
            document.lines[index] = PATH_D.sub(
                lambda m: self._replace_d(m, exported, new_d),
                document.lines[index],
            )

        correction = LegendCorrection(
            group=snapshot.group,
            box_lines=box_lines,
            dx=desired.x - exported.x,
            dy=desired.y - exported.y,
        )
        self._shift_content(document, catalog, correction)
        return correction

    @staticmethod
    def _replace_d(match: re.Match, exported: BoundingBox, new_d: str) -> str:
        box = path_quadrilateral(match.group("d"))
        if box is None or _box_error(box, exported) > 0.5:
            return match.group(0)
        quote = match.group(2)
        return f"{match.group(1)}{quote}{new_d}{quote}"

    @staticmethod
    def _shift_content(
        document: VectorDocument,
        catalog: LabelCatalog,
        correction: LegendCorrection,
    ) -> None:
        if abs(correction.dx) < 1e-3 and abs(correction.dy) < 1e-3:
            return

        first = correction.box_lines[0] + 1
        if len(correction.box_lines) > 1:
            end = correction.box_lines[-1]
        else:
            entry_lines = [
                index
                for record in catalog
                if record.group == correction.group
                for index in record.line_indices
                if index >= first
            ]
            if not entry_lines:
                return
            end = max(entry_lines) + 1

        content = document.lines[first:end]
        if not content or not _balanced(content):
            logger.info("Legend %d content is not a balanced span; icons left in place", correction.group)
            return

        document.lines.insert(end, "</g>")
        document.lines.insert(
            first,
            f'<g transform="translate({_fmt(correction.dx)},{_fmt(correction.dy)})">',
        )
        correction.shifted_lines = len(content)


def correct_legends(
    document: VectorDocument,
    snapshots: list[LegendSnapshot],
    catalog: LabelCatalog,
    padding: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0),
    adapter: LegendAdapter | None = None,
) -> list[LegendCorrection]:
    """Correct every snapshotted legend; returns the corrections applied.

    Legends are handled bottom-up in the document so that inserted wrapper
    lines never shift the line indices of a legend still to be processed.
    """
    adapter = adapter or QuadrilateralLegendAdapter()

    def position(snapshot: LegendSnapshot) -> int:
        indices = [i for r in catalog if r.group == snapshot.group for i in r.line_indices]
        return max(indices, default=-1)

    corrections = []
    for snapshot in sorted(snapshots, key=position, reverse=True):
        correction = adapter.correct(document, snapshot, catalog, padding)
        if correction is not None:
            corrections.append(correction)
    return corrections
