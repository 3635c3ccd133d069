"""Scene contract: what figtex needs from a host figure."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Protocol

from figtex.labels.catalog import ElementKind


@dataclass
class SceneElement:
    """One text slot of a host object.

    ``attribute`` names the owner attribute holding the text; ``index`` is
    set for list-valued attributes such as tick labels. ``group`` ties legend
    entries to their legend.
    """

    kind: ElementKind
    owner: Any
    attribute: str
    index: int | None = None
    group: int | None = None

    def read(self) -> Any:
        value = getattr(self.owner, self.attribute)
        return value if self.index is None else value[self.index]

    def write(self, text: str) -> None:
        if self.index is None:
            setattr(self.owner, self.attribute, text)
        else:
            getattr(self.owner, self.attribute)[self.index] = text


class SceneSource(Protocol):
    """A host figure that figtex can traverse, mutate and export.

    ``elements()`` must yield text slots in a stable traversal order;
    ``legends()`` yields objects exposing ``position`` (a BoundingBox in host
    units or None), ``orientation`` and ``box``. ``update_layout()`` is called
    after text has been changed so the host can recompute legend geometry.
    ``export_svg()`` is the host's own vector exporter.
    """

    def elements(self) -> Iterable[SceneElement]: ...

    def legends(self) -> Iterable[Any]: ...

    def canvas_size(self) -> tuple[float, float]: ...

    def update_layout(self) -> None: ...

    def export_svg(self) -> str: ...
