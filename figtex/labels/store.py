"""YAML persistence for label catalogs.

A dumped catalog lets ``figtex restore`` reconcile an SVG that was exported
earlier, without access to the host scene.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from figtex.exceptions import CatalogError
from figtex.labels.catalog import (
    Alignment,
    Anchor,
    BoundingBox,
    ElementKind,
    LabelCatalog,
    LabelRecord,
)

STORE_VERSION = 1


def record_to_dict(record: LabelRecord) -> dict[str, Any]:
    data: dict[str, Any] = {
        "placeholder": record.placeholder,
        "text": record.original_text,
        "kind": record.kind.value,
        "font_size": record.font_size,
        "color": list(record.color),
        "alignment": record.alignment.value,
        "anchor": record.anchor.value,
    }
    if record.group is not None:
        data["group"] = record.group
    if record.geometry_hint is not None:
        hint = record.geometry_hint
        data["geometry_hint"] = [hint.x, hint.y, hint.width, hint.height]
    return data


def record_from_dict(data: Any, index: int = 0) -> LabelRecord:
    where = f"labels[{index}]"
    if not isinstance(data, dict):
        raise CatalogError(f"{where}: expected a mapping")
    for key in ("placeholder", "text"):
        if not isinstance(data.get(key), str):
            raise CatalogError(f"{where}: missing required '{key}' field")

    try:
        kind = ElementKind(data.get("kind", ElementKind.PLAIN_TEXT.value))
        alignment = Alignment(data.get("alignment", Alignment.START.value))
        anchor = Anchor(data.get("anchor", Anchor.START.value))
    except ValueError as e:
        raise CatalogError(f"{where}: {e}") from e

    font_size = data.get("font_size", 10.0)
    if isinstance(font_size, bool) or not isinstance(font_size, (int, float)) or font_size <= 0:
        raise CatalogError(f"{where}: font_size must be a positive number")

    color = data.get("color", [0.0, 0.0, 0.0])
    if not isinstance(color, (list, tuple)) or len(color) != 3:
        raise CatalogError(f"{where}: color must be a list of 3 numbers")
    try:
        color = tuple(float(c) for c in color)
    except (TypeError, ValueError) as e:
        raise CatalogError(f"{where}: color must be a list of 3 numbers") from e

    hint = data.get("geometry_hint")
    if hint is not None:
        if not isinstance(hint, (list, tuple)) or len(hint) != 4:
            raise CatalogError(f"{where}: geometry_hint must be [x, y, width, height]")
        try:
            hint = BoundingBox(*(float(v) for v in hint))
        except (TypeError, ValueError) as e:
            raise CatalogError(f"{where}: geometry_hint must be [x, y, width, height]") from e

    return LabelRecord(
        placeholder=data["placeholder"],
        original_text=data["text"],
        kind=kind,
        font_size=float(font_size),
        color=color,
        alignment=alignment,
        anchor=anchor,
        geometry_hint=hint,
        group=data.get("group"),
    )


def dump_catalog(catalog: LabelCatalog, path: Path | str) -> Path:
    """Write the catalog's records to a YAML file."""
    path = Path(path)
    document = {
        "version": STORE_VERSION,
        "labels": [record_to_dict(record) for record in catalog],
    }
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(document, f, allow_unicode=True, sort_keys=False)
    return path


def load_catalog(path: Path | str) -> LabelCatalog:
    """Read a catalog written by dump_catalog().

    Raises:
        FileNotFoundError: The file does not exist.
        CatalogError: The file is not a valid label store.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Label file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid YAML syntax in {path}: {e}") from e

    if not isinstance(document, dict) or "labels" not in document:
        raise CatalogError("labels: required field is missing")
    if not isinstance(document["labels"], list):
        raise CatalogError("labels: expected a list")

    catalog = LabelCatalog()
    for index, item in enumerate(document["labels"]):
        record = record_from_dict(item, index)
        if record.placeholder in catalog:
            raise CatalogError(f"labels[{index}]: duplicate placeholder {record.placeholder!r}")
        catalog.add(record)
    return catalog
