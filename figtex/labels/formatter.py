"""Turn original label text into markup-safe, optionally styled output.

The output of format_label() is a regex substitution template (the form
``re.Match.expand`` accepts): backslashes coming from the original text are
doubled so they survive expansion literally. Color and size wrappers are
written in template form already and are added before that escaping step,
so they are never escaped twice.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from enum import Enum

from figtex.labels.catalog import DEFAULT_COLOR, RGB, LabelRecord

DEFAULT_NEUTRAL_GRAY: RGB = (0.15, 0.15, 0.15)

# & must come first so the entities introduced below are not re-escaped.
MARKUP_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ("'", "&apos;"),
    ('"', "&quot;"),
)

COLOR_WRAPPER = r"\\textcolor[rgb]{%s}{%s}"
FONT_SIZE_WRAPPER = r"{\\fontsize{%s}{%s}\\selectfont %s}"
LINE_SPREAD = 1.2


class FontSizeMode(str, Enum):
    """How label font sizes are carried into the output.

    ``auto`` wraps labels whose size differs from the run baseline,
    ``fixed`` lays out every label at the baseline without wrapping,
    ``none`` never wraps and keeps each label's own size for layout, and
    ``explicit`` wraps every label in the configured size.
    """

    AUTO = "auto"
    FIXED = "fixed"
    NONE = "none"
    EXPLICIT = "explicit"


def escape_markup(text: str) -> str:
    """Escape the five XML metacharacters to entities."""
    for char, entity in MARKUP_ESCAPES:
        text = text.replace(char, entity)
    return text


def apply_replacements(text: str, replacements: Iterable[tuple[str, str]]) -> str:
    """Apply ordered literal substitutions."""
    for search, replacement in replacements:
        text = text.replace(search, replacement)
    return text


def _same_color(a: RGB, b: RGB) -> bool:
    return all(math.isclose(x, y, abs_tol=1e-3) for x, y in zip(a, b))


def _fmt(value: float) -> str:
    return f"{value:.4g}"


def format_label(
    text: str,
    color: RGB = DEFAULT_COLOR,
    font_size: float | None = None,
    *,
    baseline_font_size: float | None = None,
    per_element_size: bool = False,
    neutral_gray: RGB = DEFAULT_NEUTRAL_GRAY,
    escape_dollar: bool = False,
) -> str:
    """Build the substitution template for one label.

    Args:
        text: Original label text (after replacements).
        color: Resolved RGB color, components in 0..1.
        font_size: Resolved font size in points.
        baseline_font_size: Size every label is typeset in by default. When
            None, any per-element size is considered different.
        per_element_size: Wrap in a font-size directive when the size
            differs from the baseline.
        neutral_gray: Color treated like the default text color.
        escape_dollar: Keep ``$`` literal instead of entering math mode.

    Example:
        >>> format_label("A & B < 3>")
        'A &amp; B &lt; 3&gt;'
    """
    body = escape_markup(text)

    # Wrappers are kept apart from the body until it has been escaped.
    prefix: list[str] = []
    suffix: list[str] = []
    if not _same_color(color, DEFAULT_COLOR) and not _same_color(color, neutral_gray):
        rgb = ",".join(_fmt(c) for c in color)
        opening, closing = (COLOR_WRAPPER % (rgb, "\0")).split("\0")
        prefix.append(opening)
        suffix.insert(0, closing)

    if per_element_size and font_size is not None and font_size != baseline_font_size:
        opening, closing = (
            FONT_SIZE_WRAPPER % (_fmt(font_size), _fmt(font_size * LINE_SPREAD), "\0")
        ).split("\0")
        prefix.insert(0, opening)
        suffix.append(closing)

    body = body.replace("\\", "\\\\")
    if escape_dollar:
        body = body.replace("$", "\\$")

    return "".join(prefix) + body + "".join(suffix)


class LabelFormatter:
    """format_label() bound to the options of one run."""

    def __init__(
        self,
        font_size_mode: FontSizeMode = FontSizeMode.AUTO,
        font_size: float | None = None,
        neutral_gray: RGB = DEFAULT_NEUTRAL_GRAY,
        escape_dollar: bool = False,
        replace_list: Iterable[tuple[str, str]] = (),
    ) -> None:
        self.font_size_mode = FontSizeMode(font_size_mode)
        if self.font_size_mode is FontSizeMode.EXPLICIT and font_size is None:
            raise ValueError("explicit font size mode needs a font_size")
        self.font_size = font_size
        self.neutral_gray = neutral_gray
        self.escape_dollar = escape_dollar
        self.replace_list = tuple(replace_list)

    @classmethod
    def from_config(cls, config) -> LabelFormatter:
        return cls(
            font_size_mode=config.font_size_mode,
            font_size=config.font_size,
            neutral_gray=config.neutral_gray,
            escape_dollar=config.escape_dollar,
            replace_list=config.replace_list,
        )

    def layout_font_size(self, record: LabelRecord, baseline: float | None) -> float:
        if self.font_size_mode is FontSizeMode.EXPLICIT:
            return self.font_size
        if self.font_size_mode is FontSizeMode.FIXED and baseline is not None:
            return baseline
        return record.font_size

    def format_record(self, record: LabelRecord, baseline: float | None) -> str:
        text = apply_replacements(record.original_text, self.replace_list)
        mode = self.font_size_mode

        if mode is FontSizeMode.EXPLICIT:
            return format_label(
                text,
                record.color,
                self.font_size,
                per_element_size=True,
                neutral_gray=self.neutral_gray,
                escape_dollar=self.escape_dollar,
            )

        return format_label(
            text,
            record.color,
            record.font_size,
            baseline_font_size=baseline,
            per_element_size=mode is FontSizeMode.AUTO,
            neutral_gray=self.neutral_gray,
            escape_dollar=self.escape_dollar,
        )
