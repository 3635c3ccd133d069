"""Collision-free placeholder generation.

Every label in a scene is swapped for a placeholder before export so that
the host exporter only ever sees plain, markup-safe strings. The registry
guarantees that no two labels in one run share a placeholder, whatever
mode produced them.
"""

from __future__ import annotations

import itertools
import re
import string
from collections.abc import Iterator
from enum import Enum

from figtex.labels.catalog import LabelCatalog


class LabelMode(str, Enum):
    """Placeholder generation strategies."""

    SANITIZE = "sanitize"
    SHORT = "short"
    PADDED = "padded"


FILLERS = (".", ";", "'", "^")
PADDING_SUFFIX = "..."

# Longest filler combination tried before repeating the last filler.
MAX_COMBINATION_LENGTH = 2
MAX_COLLISION_ATTEMPTS = 10_000

_UNSAFE_CHARS = re.compile(r"[^\w\s-]|_", re.UNICODE)
_WHITESPACE_RUN = re.compile(r"\s+")


def sanitize_text(text: str) -> str:
    """Replace characters other than letters, digits, whitespace and hyphens
    with ``.`` and collapse whitespace runs to a single space."""
    cleaned = _UNSAFE_CHARS.sub(".", text)
    return _WHITESPACE_RUN.sub(" ", cleaned).strip()


def short_name(index: int) -> str:
    """Bijective base-26 name: 0 -> a, 25 -> z, 26 -> aa, 27 -> ab."""
    if index < 0:
        raise ValueError("index must be non-negative")
    letters = []
    index += 1
    while index:
        index, rem = divmod(index - 1, 26)
        letters.append(string.ascii_lowercase[rem])
    return "".join(reversed(letters))


def _filler_suffixes() -> Iterator[str]:
    for length in range(1, MAX_COMBINATION_LENGTH + 1):
        for combo in itertools.product(FILLERS, repeat=length):
            yield "".join(combo)
    for repeat in itertools.count(MAX_COMBINATION_LENGTH + 1):
        yield FILLERS[-1] * repeat


class LabelRegistry:
    """Hands out placeholders that are unique within one conversion run.

    The short-name counter is shared across all modes and only moves
    forward, so replaying the same request sequence after reset() yields the
    same placeholders.
    """

    def __init__(self, catalog: LabelCatalog | None = None) -> None:
        self.catalog = catalog if catalog is not None else LabelCatalog()
        self._counter = 0

    def reset(self, catalog: LabelCatalog | None = None) -> None:
        """Start a new run with a fresh (or given) catalog."""
        self.catalog = catalog if catalog is not None else LabelCatalog()
        self._counter = 0

    def register(self, text: str, mode: LabelMode | str = LabelMode.SANITIZE) -> str:
        """Return a new placeholder for ``text`` and reserve it in the catalog."""
        mode = LabelMode(mode)

        if mode is LabelMode.SHORT:
            placeholder = self._next_short()
        else:
            base = sanitize_text(text)
            if mode is LabelMode.PADDED:
                base += PADDING_SUFFIX
            if not base:
                placeholder = self._next_short()
            else:
                placeholder = self._resolve_collision(base)

        self.catalog.reserve(placeholder)
        return placeholder

    def _next_short(self) -> str:
        for _ in range(MAX_COLLISION_ATTEMPTS):
            candidate = short_name(self._counter)
            self._counter += 1
            if candidate not in self.catalog:
                return candidate
        raise AssertionError("short-name counter failed to find a free placeholder")

    def _resolve_collision(self, base: str) -> str:
        if base not in self.catalog:
            return base
        suffixes = _filler_suffixes()
        for _ in range(MAX_COLLISION_ATTEMPTS):
            candidate = base + next(suffixes)
            if candidate not in self.catalog:
                return candidate
        raise AssertionError(f"no free placeholder for {base!r} after {MAX_COLLISION_ATTEMPTS} attempts")
