"""Exception hierarchy for figtex.

Only pre-flight configuration problems and an unreadable scene abort a
conversion. Everything that goes wrong after the raw SVG has been written
is reported as a warning on the ConversionResult instead.
"""

from __future__ import annotations

from typing import Any


class FigtexError(Exception):
    """Base class for all figtex errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        extra = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({extra})"


class ConfigError(FigtexError):
    """Invalid configuration value or configuration file."""


class BackendNotFoundError(ConfigError):
    """The vector backend (Inkscape) could not be located or probed."""

    def __init__(self, backend: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            f"Backend not found or not usable: {backend}. "
            "Install Inkscape, point FIGTEX_INKSCAPE at it, or disable PDF export.",
            details,
        )
        self.backend = backend


class SceneExportError(FigtexError):
    """The scene could not be traversed or exported to SVG."""


class BackendError(FigtexError):
    """The backend ran but did not produce the expected files."""

    def __init__(
        self,
        command: list[str],
        returncode: int | None,
        output: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            f"Backend command failed (exit {returncode}): {' '.join(command)}",
            details,
        )
        self.command = command
        self.returncode = returncode
        self.output = output


class CatalogError(FigtexError):
    """A label store file is malformed."""
