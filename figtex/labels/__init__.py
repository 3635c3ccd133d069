"""Label bookkeeping for figtex.

This subpackage provides:
- Collision-free placeholder generation (LabelRegistry)
- The per-run label catalog and its records
- Escaping and LaTeX styling of the restored text
- YAML persistence of catalogs
"""

from figtex.labels.catalog import (
    Alignment,
    Anchor,
    BoundingBox,
    ElementKind,
    LabelCatalog,
    LabelRecord,
)
from figtex.labels.formatter import FontSizeMode, LabelFormatter, escape_markup, format_label
from figtex.labels.registry import LabelMode, LabelRegistry, sanitize_text, short_name
from figtex.labels.store import dump_catalog, load_catalog

__all__ = [
    "Alignment",
    "Anchor",
    "BoundingBox",
    "ElementKind",
    "LabelCatalog",
    "LabelRecord",
    "FontSizeMode",
    "LabelFormatter",
    "escape_markup",
    "format_label",
    "LabelMode",
    "LabelRegistry",
    "sanitize_text",
    "short_name",
    "dump_catalog",
    "load_catalog",
]
