"""Removal of the exporter's opaque page background."""

from __future__ import annotations

import logging
import re

from figtex.svg.document import CanvasSize, VectorDocument, get_attribute, parse_length

logger = logging.getLogger(__name__)

RECT = re.compile(r"<rect\b[^>]*?/>|<rect\b[^>]*>\s*</rect\s*>", re.DOTALL)
EMPTY_GROUP = re.compile(r"<g\b[^>]*>\s*</g\s*>", re.DOTALL)
_FILL_DECLARATION = re.compile(r"(?<![\w-])fill\s*:\s*([^;\"']+)")
_WHITE = {"white", "#fff", "#ffffff", "rgb(255,255,255)", "rgb(100%,100%,100%)"}

SIZE_TOLERANCE = 0.5


def _is_white(value: str | None) -> bool:
    if value is None:
        return False
    return re.sub(r"\s+", "", value.lower()) in _WHITE


def _fill_of(markup: str) -> str | None:
    """Last fill declared in a markup fragment (attribute or style)."""
    fills = [m.group(1) for m in _FILL_DECLARATION.finditer(markup)]
    for match in re.finditer(r"(?<![\w:-])fill\s*=\s*([\"'])(.*?)\1", markup):
        fills.append(match.group(2))
    return fills[-1] if fills else None


def _at_origin(rect: str) -> bool:
    for name in ("x", "y"):
        length = parse_length(get_attribute(rect, name))
        if length is not None and abs(length[0]) > SIZE_TOLERANCE:
            return False
    return True


def _spans(value: str | None, extent: float) -> bool:
    length = parse_length(value)
    if length is None:
        return False
    number, unit = length
    if unit == "%":
        return abs(number - 100.0) <= SIZE_TOLERANCE
    return abs(number - extent) <= SIZE_TOLERANCE


def is_page_background(rect: str, context: str, canvas: CanvasSize) -> bool:
    """True for a white rectangle at the origin covering the whole canvas.

    ``context`` is the markup preceding the rectangle on its line; a fill
    inherited from an enclosing group counts.
    """
    if not _at_origin(rect):
        return False
    if not (_spans(get_attribute(rect, "width"), canvas.width) and _spans(get_attribute(rect, "height"), canvas.height)):
        return False
    fill = _fill_of(rect)
    if fill is None:
        fill = _fill_of(context)
    return _is_white(fill)


def remove_white_background(document: VectorDocument) -> bool:
    """Delete the first page-filling white rectangle and its enclosing group.

    Returns True when a background was removed.
    """
    canvas = document.canvas_size()
    if canvas is None:
        logger.info("No canvas size declared; background left in place")
        return False

    for index, line in enumerate(document.lines):
        if "<rect" not in line:
            continue
        for match in RECT.finditer(line):
            if not is_page_background(match.group(0), line[: match.start()], canvas):
                continue

            remainder = line[: match.start()] + line[match.end() :]
            if EMPTY_GROUP.fullmatch(remainder.strip()):
                del document.lines[index]
            else:
                document.lines[index] = remainder
            logger.debug("Removed page background on line %d", index)
            return True

    logger.info("No page background rectangle found")
    return False
