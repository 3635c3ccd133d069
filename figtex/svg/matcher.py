"""Match exported text nodes back to their labels and rewrite them."""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass, field

from figtex.labels.catalog import Anchor, LabelCatalog, LabelRecord
from figtex.labels.formatter import format_label
from figtex.svg.anchor import (
    DEFAULT_ESTIMATOR,
    WidthEstimator,
    resolve_record_anchor,
    y_offset,
)
from figtex.svg.document import VectorDocument, get_attribute

logger = logging.getLogger(__name__)

TEXT_NODE = re.compile(
    r"<text(?P<attrs>(?:\s[^>]*)?)>(?P<content>.*?)</text\s*>",
    re.DOTALL,
)
_ALIGN_DECLARATIONS = re.compile(r"\s*\b(?:text-anchor|text-align)\s*:[^;\"']*;?")


def _fmt(value: float) -> str:
    return f"{value:.6g}"


def set_attribute(attrs: str, name: str, value: str) -> str:
    """Set (or append) attribute ``name`` in an attribute string."""
    pattern = re.compile(r"(?<![\w:-])(" + re.escape(name) + r"\s*=\s*)([\"']).*?\2", re.DOTALL)
    if pattern.search(attrs):
        return pattern.sub(lambda m: f"{m.group(1)}{m.group(2)}{value}{m.group(2)}", attrs, count=1)
    stripped = attrs.rstrip()
    return f'{stripped} {name}="{value}"' + attrs[len(stripped):]


def append_style(attrs: str, declarations: str) -> str:
    """Append CSS declarations, replacing existing alignment declarations."""
    style = get_attribute(attrs, "style")
    if style is None:
        return set_attribute(attrs, "style", declarations)
    style = _ALIGN_DECLARATIONS.sub("", style).strip()
    if style and not style.endswith(";"):
        style += ";"
    return set_attribute(attrs, "style", style + declarations)


def prepend_transform(attrs: str, transform: str) -> str:
    current = get_attribute(attrs, "transform")
    value = transform if not current else f"{transform} {current.strip()}"
    return set_attribute(attrs, "transform", value)


def _float(value: str | None, default: float = 0.0) -> float:
    if value is None:
        return default
    try:
        return float(value.split()[0].rstrip("px"))
    except (ValueError, IndexError):
        return default


def alignment_style(alignment: str, anchor: str) -> str:
    return f"text-align:{alignment};text-anchor:{anchor}"


@dataclass
class ReconcileReport:
    """Outcome of one reconciliation pass."""

    text_nodes: int = 0
    matched: int = 0
    recovered: int = 0
    unmanaged: int = 0
    missing: list[LabelRecord] = field(default_factory=list)

    def warnings(self) -> list[str]:
        messages = []
        if self.text_nodes == 0:
            messages.append(
                "No text nodes found in the exported SVG; the renderer may have "
                "drawn text as paths"
            )
        if self.recovered:
            messages.append(
                f"{self.recovered} label(s) matched only after whitespace normalisation"
            )
        if self.missing:
            names = ", ".join(repr(r.placeholder) for r in self.missing[:10])
            more = "" if len(self.missing) <= 10 else f" and {len(self.missing) - 10} more"
            messages.append(
                f"{len(self.missing)} label(s) not found in the exported SVG: {names}{more}"
            )
        return messages


class TextNodeMatcher:
    """Rewrites text nodes whose content is a registered placeholder.

    Matched nodes get x="0", a y offset derived from their anchor, an
    alignment declaration in their style and the restored text. Nodes that
    match nothing keep their content and only get start alignment.
    """

    def __init__(
        self,
        catalog: LabelCatalog,
        *,
        y_corr_factor: float = 0.0,
        squish_factor: float | None = None,
        estimator: WidthEstimator = DEFAULT_ESTIMATOR,
    ) -> None:
        self.catalog = catalog
        self.y_corr_factor = y_corr_factor
        self.squish_factor = squish_factor
        self.estimator = estimator
        self.report = ReconcileReport()
        self._normalized: dict[str, LabelRecord] | None = None

    def lookup(self, content: str) -> LabelRecord | None:
        record = self.catalog.get(content)
        if record is not None:
            return record

        unescaped = html.unescape(content)
        record = self.catalog.get(unescaped)
        if record is not None:
            return record

        record = self._recover(unescaped)
        if record is not None:
            self.report.recovered += 1
            logger.debug("Recovered label %r from text %r", record.placeholder, content)
        return record

    def _recover(self, content: str) -> LabelRecord | None:
        if self._normalized is None:
            self._normalized = {}
            for record in self.catalog:
                key = " ".join(record.placeholder.split())
                self._normalized.setdefault(key, record)
        key = " ".join(content.split())
        if not key:
            return None
        record = self._normalized.get(key)
        if record is None or record.found_in_output:
            return None
        return record

    def rewrite_line(self, line: str, index: int = 0) -> str:
        matches = list(TEXT_NODE.finditer(line))
        # Right to left so that earlier spans keep their offsets.
        for match in reversed(matches):
            line = line[: match.start()] + self._rewrite_node(match, index) + line[match.end() :]
        return line

    def _rewrite_node(self, match: re.Match, index: int) -> str:
        self.report.text_nodes += 1
        attrs = match.group("attrs")
        content = match.group("content")
        head = match.string[match.start() : match.start("attrs")]
        between = match.string[match.end("attrs") : match.start("content")]
        tail = match.string[match.end("content") : match.end()]

        record = self.lookup(content)
        if record is None:
            self.report.unmanaged += 1
            attrs = append_style(attrs, alignment_style("start", Anchor.START.value))
            return head + attrs + between + content + tail

        self.report.matched += 1
        record.found_in_output = True
        record.line_indices.append(index)

        font_size = record.layout_font_size or record.font_size
        x = _float(get_attribute(attrs, "x"))
        alignment, anchor = resolve_record_anchor(record, x, font_size, self.estimator)
        y = y_offset(anchor, font_size) + self.y_corr_factor * font_size

        attrs = set_attribute(attrs, "x", "0")
        attrs = set_attribute(attrs, "y", _fmt(y))
        attrs = append_style(attrs, alignment_style(alignment.value, anchor.value))
        if self.squish_factor is not None:
            attrs = prepend_transform(attrs, f"scale({_fmt(self.squish_factor)},1)")

        template = record.text if record.text is not None else format_label(record.original_text)
        return head + attrs + between + match.expand(template) + tail

    def reconcile(self, document: VectorDocument) -> ReconcileReport:
        """Rewrite every text node of ``document`` in place."""
        self.report = ReconcileReport()
        for index, line in enumerate(document.lines):
            if "<text" in line:
                document.lines[index] = self.rewrite_line(line, index)
        self.report.missing = self.catalog.missing()
        logger.info(
            "Reconciled %d text node(s): %d matched, %d unmanaged, %d label(s) missing",
            self.report.text_nodes,
            self.report.matched,
            self.report.unmanaged,
            len(self.report.missing),
        )
        return self.report


def reconcile(
    document: VectorDocument,
    catalog: LabelCatalog,
    *,
    y_corr_factor: float = 0.0,
    squish_factor: float | None = None,
    estimator: WidthEstimator = DEFAULT_ESTIMATOR,
) -> ReconcileReport:
    """Convenience wrapper around TextNodeMatcher.reconcile()."""
    matcher = TextNodeMatcher(
        catalog,
        y_corr_factor=y_corr_factor,
        squish_factor=squish_factor,
        estimator=estimator,
    )
    return matcher.reconcile(document)
