"""Label records and the per-run label catalog."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

RGB = tuple[float, float, float]

DEFAULT_COLOR: RGB = (0.0, 0.0, 0.0)


class ElementKind(str, Enum):
    """Kinds of text-bearing scene elements."""

    PLAIN_TEXT = "plain_text"
    LEGEND_ENTRY = "legend_entry"
    AXIS_TICK = "axis_tick"
    COLORBAR_TICK = "colorbar_tick"
    CONSTANT_LINE_LABEL = "constant_line_label"
    AXIS_EXPONENT = "axis_exponent"


class Alignment(str, Enum):
    """Which edge of the original label box the anchor corresponds to."""

    START = "start"
    CENTER = "center"
    END = "end"
    AUTO = "auto"


class Anchor(str, Enum):
    """SVG ``text-anchor`` value of a restored text node."""

    START = "start"
    MIDDLE = "middle"
    END = "end"
    AUTO = "auto"


ANCHOR_FOR_ALIGNMENT = {
    Alignment.START: Anchor.START,
    Alignment.CENTER: Anchor.MIDDLE,
    Alignment.END: Anchor.END,
    Alignment.AUTO: Anchor.AUTO,
}
ALIGNMENT_FOR_ANCHOR = {anchor: alignment for alignment, anchor in ANCHOR_FOR_ALIGNMENT.items()}


@dataclass
class BoundingBox:
    """Axis-aligned box: x, y is the lower-left corner in host units
    (upper-left in document units)."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y + self.height


@dataclass
class LabelRecord:
    """Metadata for one registered label.

    ``text`` and ``layout_font_size`` are filled in by LabelCatalog.finalize().
    ``text`` holds the escaped, optionally styled substitution template that
    replaces the placeholder; ``layout_font_size`` is the size used for
    position arithmetic.
    """

    placeholder: str
    original_text: str
    kind: ElementKind = ElementKind.PLAIN_TEXT
    font_size: float = 10.0
    color: RGB = DEFAULT_COLOR
    alignment: Alignment = Alignment.START
    anchor: Anchor = Anchor.START
    geometry_hint: BoundingBox | None = None
    found_in_output: bool = False
    group: int | None = None
    text: str | None = None
    layout_font_size: float | None = None
    line_indices: list[int] = field(default_factory=list)


class LabelCatalog:
    """Ordered, append-only store of LabelRecords for one conversion run.

    Insertion order is the priority order when content could match more than
    one record. The placeholder set is shared with the LabelRegistry, which
    reserves every placeholder it hands out.
    """

    def __init__(self) -> None:
        self._records: list[LabelRecord] = []
        self._by_placeholder: dict[str, LabelRecord] = {}
        self._reserved: set[str] = set()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[LabelRecord]:
        return iter(self._records)

    def __contains__(self, placeholder: object) -> bool:
        return placeholder in self._reserved

    def reserve(self, placeholder: str) -> None:
        """Mark a placeholder as taken (called by the registry)."""
        if placeholder in self._reserved:
            raise ValueError(f"placeholder already reserved: {placeholder!r}")
        self._reserved.add(placeholder)

    def add(self, record: LabelRecord) -> LabelRecord:
        """Append a record whose placeholder is reserved (or free)."""
        if record.placeholder in self._by_placeholder:
            raise ValueError(f"duplicate placeholder: {record.placeholder!r}")
        self._reserved.add(record.placeholder)
        self._by_placeholder[record.placeholder] = record
        self._records.append(record)
        return record

    def get(self, placeholder: str) -> LabelRecord | None:
        return self._by_placeholder.get(placeholder)

    def missing(self) -> list[LabelRecord]:
        """Records whose placeholder never showed up in the output."""
        return [r for r in self._records if not r.found_in_output]

    def baseline_font_size(self) -> float | None:
        """Most common font size across records (first seen wins ties)."""
        counts: dict[float, int] = {}
        for record in self._records:
            counts[record.font_size] = counts.get(record.font_size, 0) + 1
        if not counts:
            return None
        return max(counts, key=counts.__getitem__)

    def finalize(self, formatter) -> None:
        """Compute the substitution text of every record.

        Args:
            formatter: A LabelFormatter bound to this run's options.
        """
        baseline = self.baseline_font_size()
        for record in self._records:
            record.text = formatter.format_record(record, baseline)
            record.layout_font_size = formatter.layout_font_size(record, baseline)
