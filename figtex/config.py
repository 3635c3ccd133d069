"""Configuration for figtex conversions.

Options can come from a YAML file, from the ``FIGTEX_INKSCAPE`` environment
variable, and from keyword overrides (the CLI layers its flags this way).
Every value is validated on the way in so that a bad option fails before
any file is written.

Example ``figtex.yaml``::

    y_corr_factor: 0.0
    font_size_mode: explicit
    font_size: 9
    export_mode: export-area-page
    replace_list:
      - ["1...", "$u_\\mathrm{S,1}$"]
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from figtex.exceptions import ConfigError
from figtex.labels.formatter import FontSizeMode
from figtex.labels.registry import LabelMode
from figtex.tools.inkscape import ExportMode

DEFAULT_CONFIG_NAME = "figtex.yaml"
BACKEND_ENV_VAR = "FIGTEX_INKSCAPE"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Config:
    """Validated conversion options.

    Attributes:
        y_corr_factor: Baseline nudge applied to every restored label, as a
            fraction of its font size.
        legend_padding: Extra legend box margin in points (top, bottom,
            left, right).
        font_size_mode: How label font sizes reach the output (see
            FontSizeMode).
        font_size: Font size in points, required for ``explicit`` mode.
        replace_list: Ordered literal substitutions applied to the original
            text before escaping.
        squished_text: Prepend a horizontal scale to restored text nodes.
        squish_factor: Horizontal scale used when squished_text is set.
        remove_white_background: Drop the exporter's opaque page fill.
        export_mode: Backend export area mode.
        export_pdf: Invoke the backend to produce .pdf and .pdf_tex.
        backend: Backend executable name or path.
        label_mode: Placeholder mode for ordinary labels.
        legend_label_mode: Placeholder mode for the first legend entry.
        max_line_length: Retokenizer length cap per logical line.
        neutral_gray: Text color treated like the default (no color wrap).
        escape_dollar: Render ``$`` literally instead of as math shift.
        keep_labels: Write ``<base>.labels.yaml`` next to the output.
        log_level: Logging level used by the CLI.
    """

    y_corr_factor: float = 0.0
    legend_padding: tuple[float, float, float, float] = (1.0, 1.0, 1.0, 1.0)
    font_size_mode: FontSizeMode = FontSizeMode.AUTO
    font_size: float | None = None
    replace_list: tuple[tuple[str, str], ...] = ()
    squished_text: bool = False
    squish_factor: float = 0.95
    remove_white_background: bool = True
    export_mode: ExportMode = ExportMode.AREA_DRAWING
    export_pdf: bool = True
    backend: str = "inkscape"
    label_mode: LabelMode = LabelMode.SANITIZE
    legend_label_mode: LabelMode = LabelMode.PADDED
    max_line_length: int = 1024
    neutral_gray: tuple[float, float, float] = (0.15, 0.15, 0.15)
    escape_dollar: bool = False
    keep_labels: bool = False
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.font_size_mode is FontSizeMode.EXPLICIT and self.font_size is None:
            raise ConfigError("font_size: required when font_size_mode is 'explicit'")
        if self.font_size is not None and self.font_size <= 0:
            raise ConfigError("font_size: must be positive")
        if self.squish_factor <= 0:
            raise ConfigError("squish_factor: must be positive")
        if self.max_line_length < 1:
            raise ConfigError("max_line_length: must be at least 1")
        if self.label_mode is LabelMode.PADDED:
            raise ConfigError("label_mode: 'padded' is reserved for legend_label_mode")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Config:
        """Build a Config from plain (YAML-style) values, validating each key."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(
                f"{unknown[0]}: unknown option (valid options: {', '.join(sorted(known))})"
            )

        values: dict[str, Any] = {}
        for key, raw in data.items():
            values[key] = _COERCERS[key](key, raw)
        return cls(**values)

    @classmethod
    def load(cls, path: Path | str | None = None, **overrides: Any) -> Config:
        """Load configuration from YAML, the environment and overrides.

        Args:
            path: YAML file to read. When omitted, ``figtex.yaml`` in the
                current directory is used if it exists.
            **overrides: Option values that win over the file.

        Raises:
            FileNotFoundError: An explicit path does not exist.
            ConfigError: The file or an override is invalid.
        """
        data: dict[str, Any] = {}

        if path is not None:
            config_path = Path(path)
            if not config_path.exists():
                raise FileNotFoundError(f"Config file not found: {config_path}")
        else:
            config_path = Path.cwd() / DEFAULT_CONFIG_NAME
            if not config_path.exists():
                config_path = None

        if config_path is not None:
            data.update(_read_yaml(config_path))

        env_backend = os.environ.get(BACKEND_ENV_VAR)
        if env_backend and "backend" not in data:
            data["backend"] = env_backend

        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls.from_dict(data)

    def replace(self, **changes: Any) -> Config:
        """Return a validated copy with some options changed."""
        data = self.to_dict()
        data.update({k: v for k, v in changes.items() if v is not None})
        return Config.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Plain representation suitable for YAML dumping."""
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, Enum):
                data[key] = value.value
            elif isinstance(value, tuple):
                data[key] = [list(v) if isinstance(v, tuple) else v for v in value]
        return data


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {path}: {e}") from e

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Config root must be a mapping, got {type(loaded).__name__}")
    return loaded


# ---------------------------------------------------------------------------
# Value coercion
# ---------------------------------------------------------------------------


def _number(key: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{key}: expected number, got {type(value).__name__}")
    return float(value)


def _optional_number(key: str, value: Any) -> float | None:
    if value is None:
        return None
    return _number(key, value)


def _integer(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key}: expected integer, got {type(value).__name__}")
    return value


def _boolean(key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{key}: expected boolean, got {type(value).__name__}")
    return value


def _string(key: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{key}: expected non-empty string")
    return value


def _enum(enum_cls: type[Enum]):
    def coerce(key: str, value: Any) -> Enum:
        if isinstance(value, enum_cls):
            return value
        try:
            return enum_cls(value)
        except ValueError:
            choices = ", ".join(str(m.value) for m in enum_cls)
            raise ConfigError(f"{key}: must be one of {choices}, got {value!r}") from None

    return coerce


def _number_tuple(length: int, low: float | None = None, high: float | None = None):
    def coerce(key: str, value: Any) -> tuple[float, ...]:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = [value] * length
        if not isinstance(value, (list, tuple)) or len(value) != length:
            raise ConfigError(f"{key}: expected a list of {length} numbers")
        result = tuple(_number(key, v) for v in value)
        for v in result:
            if (low is not None and v < low) or (high is not None and v > high):
                raise ConfigError(f"{key}: values must be between {low} and {high}")
        return result

    return coerce


def _replace_list(key: str, value: Any) -> tuple[tuple[str, str], ...]:
    if value is None:
        return ()
    if isinstance(value, Mapping):
        value = list(value.items())
    if not isinstance(value, (list, tuple)):
        raise ConfigError(f"{key}: expected a list of [search, replacement] pairs")

    pairs = []
    for i, pair in enumerate(value):
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            raise ConfigError(f"{key}[{i}]: expected a [search, replacement] pair")
        search, replacement = pair
        if not isinstance(search, str) or not isinstance(replacement, str):
            raise ConfigError(f"{key}[{i}]: search and replacement must be strings")
        if not search:
            raise ConfigError(f"{key}[{i}]: search string must not be empty")
        pairs.append((search, replacement))
    return tuple(pairs)


def _log_level(key: str, value: Any) -> str:
    level = _string(key, value).upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(f"{key}: must be one of {', '.join(_LOG_LEVELS)}")
    return level


_COERCERS = {
    "y_corr_factor": _number,
    "legend_padding": _number_tuple(4),
    "font_size_mode": _enum(FontSizeMode),
    "font_size": _optional_number,
    "replace_list": _replace_list,
    "squished_text": _boolean,
    "squish_factor": _number,
    "remove_white_background": _boolean,
    "export_mode": _enum(ExportMode),
    "export_pdf": _boolean,
    "backend": _string,
    "label_mode": _enum(LabelMode),
    "legend_label_mode": _enum(LabelMode),
    "max_line_length": _integer,
    "neutral_gray": _number_tuple(3, 0.0, 1.0),
    "escape_dollar": _boolean,
    "keep_labels": _boolean,
    "log_level": _log_level,
}
