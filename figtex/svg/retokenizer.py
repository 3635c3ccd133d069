"""Reflow exported SVG markup into one logical element per line.

Host exporters emit markup either as one long line or wrapped at arbitrary
points (Batik, for instance, breaks lines inside tags). Later stages match
text nodes, rectangles and paths with line-scoped patterns, which only works
if every element of interest sits on a single line.

The root start tag (with anything before it) is a line of its own. After
that a line ends where every element opened since the start of the line has
been closed again, so each top-level child of the root becomes one line.
Containers that do not close within the length cap are cut before the next
opening tag once the line has grown past ``max_length``. Tags inside comments
and CDATA sections are text, not structure.
"""

from __future__ import annotations

import re

from figtex.svg.document import VectorDocument

DEFAULT_MAX_LINE_LENGTH = 1024

# Element starts only; declarations, processing instructions and comments
# neither open nor close anything.
OPEN_TAG = re.compile(r"<(?![/?!])")
CLOSE_TAG = re.compile(r"</[^>]*>|/>")
ROOT_START = re.compile(r"<(?![/?!])[^>]*>")
# Bodies whose contents are not markup.
OPAQUE_SPAN = re.compile(r"<!--.*?-->|<!\[CDATA\[.*?\]\]>", re.DOTALL)


def _opaque_spans(markup: str) -> list[tuple[int, int]]:
    return [m.span() for m in OPAQUE_SPAN.finditer(markup)]


def _inside(offset: int, spans: list[tuple[int, int]]) -> bool:
    return any(start <= offset < end for start, end in spans)


def tag_events(markup: str) -> list[tuple[int, int]]:
    """Sorted (offset, +1/-1) events for element opens and closes.

    Tags inside comments and CDATA sections are not counted.
    """
    spans = _opaque_spans(markup)
    opens = [(m.start(), 1) for m in OPEN_TAG.finditer(markup) if not _inside(m.start(), spans)]
    closes = [(m.end(), -1) for m in CLOSE_TAG.finditer(markup) if not _inside(m.start(), spans)]
    # At equal offsets a close (ending there) sorts before an open (starting there).
    return sorted(opens + closes)


def _root_start(markup: str) -> re.Match | None:
    spans = _opaque_spans(markup)
    for match in ROOT_START.finditer(markup):
        if not _inside(match.start(), spans):
            return match
    return None


def split_lines(markup: str, max_length: int = DEFAULT_MAX_LINE_LENGTH) -> list[str]:
    """Split markup into balanced element spans, whitespace-trimmed."""
    lines: list[str] = []
    start = 0
    depth = 0

    def emit(end: int) -> None:
        chunk = markup[start:end].strip()
        if chunk:
            lines.append(chunk)

    root = _root_start(markup)
    if root is not None and not root.group(0).endswith("/>"):
        emit(root.end())
        start = root.end()

    for offset, delta in tag_events(markup):
        if offset < start:
            continue
        if delta > 0 and depth > 0 and offset - start > max_length:
            emit(offset)
            start, depth = offset, 0

        depth += delta
        if delta < 0 and depth <= 0:
            emit(offset)
            start, depth = offset, 0

    emit(len(markup))
    return lines


def retokenize(markup: str, max_length: int = DEFAULT_MAX_LINE_LENGTH) -> VectorDocument:
    """Build a VectorDocument from raw exporter output."""
    return VectorDocument(split_lines(markup, max_length))
