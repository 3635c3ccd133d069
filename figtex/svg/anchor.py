"""Position and alignment resolution for restored text nodes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from figtex.labels.catalog import ALIGNMENT_FOR_ANCHOR, Alignment, Anchor, LabelRecord

# Vertical offset of the restored baseline, in multiples of the font size.
ANCHOR_Y_FACTORS = {
    Anchor.START: 1.12,
    Anchor.MIDDLE: 0.44,
    Anchor.END: -0.24,
}


def y_offset(anchor: Anchor | str, font_size: float) -> float:
    """Baseline offset for a resolved anchor.

    >>> round(y_offset("start", 10), 6)
    11.2
    """
    anchor = Anchor(anchor)
    if anchor is Anchor.AUTO:
        raise ValueError("auto anchor must be resolved before computing an offset")
    return ANCHOR_Y_FACTORS[anchor] * font_size


class WidthEstimator(Protocol):
    """Estimates the rendered width of a text run."""

    def estimate(self, char_count: int, font_size: float) -> float: ...


@dataclass(frozen=True)
class LinearWidthEstimator:
    """Width ~ font_size * (char_factor * chars + size_factor) + offset.

    The defaults were fitted on Helvetica output of the Batik exporter; a
    different renderer or font stack needs its own coefficients.
    """

    char_factor: float = 0.55
    size_factor: float = 0.06
    offset: float = 0.0

    def estimate(self, char_count: int, font_size: float) -> float:
        return font_size * (self.char_factor * char_count + self.size_factor) + self.offset


DEFAULT_ESTIMATOR = LinearWidthEstimator()


def resolve_auto_anchor(
    x: float,
    char_count: int,
    font_size: float,
    estimator: WidthEstimator = DEFAULT_ESTIMATOR,
) -> Anchor:
    """Decide between middle and end anchoring from the exporter's x.

    An exporter that centred the run places it at about -width/2, one that
    right-aligned it at about -width.
    """
    full = estimator.estimate(char_count, font_size)
    to_center = abs(x + full / 2.0)
    to_end = abs(x + full)
    return Anchor.MIDDLE if to_center <= to_end else Anchor.END


def resolve_record_anchor(
    record: LabelRecord,
    x: float,
    font_size: float,
    estimator: WidthEstimator = DEFAULT_ESTIMATOR,
) -> tuple[Alignment, Anchor]:
    """Resolve (and persist) the alignment and anchor of a record."""
    if record.anchor is Anchor.AUTO:
        record.anchor = resolve_auto_anchor(x, len(record.placeholder), font_size, estimator)
    if record.alignment is Alignment.AUTO:
        record.alignment = ALIGNMENT_FOR_ANCHOR[record.anchor]
    return record.alignment, record.anchor
