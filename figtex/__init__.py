"""figtex: Export figures as SVG, PDF and LaTeX overlays.

Labels of a host figure are swapped for placeholders before the host's own
SVG export, restored (escaped and LaTeX-styled) in the exported SVG, and the
result is handed to Inkscape to produce a ``.pdf`` plus a ``.pdf_tex``
overlay in which LaTeX typesets every label.

Example:
    >>> from figtex import FigureConverter, Config
    >>> converter = FigureConverter(Config(export_pdf=False))
    >>> result = converter.convert(figure, "build/velocity")
    >>> result.svg_path
    PosixPath('build/velocity.svg')
"""

from figtex.api import ConversionResult, FigureConverter, convert
from figtex.config import Config
from figtex.exceptions import (
    BackendError,
    BackendNotFoundError,
    CatalogError,
    ConfigError,
    FigtexError,
    SceneExportError,
)
from figtex.labels import LabelCatalog, LabelRegistry

__version__ = "0.1.0"

__all__ = [
    # Main API
    "FigureConverter",
    "ConversionResult",
    "convert",
    "Config",
    # Labels
    "LabelCatalog",
    "LabelRegistry",
    # Exceptions
    "FigtexError",
    "ConfigError",
    "BackendNotFoundError",
    "SceneExportError",
    "BackendError",
    "CatalogError",
    # Metadata
    "__version__",
]
