"""External tools integration for figtex.

This subpackage provides:
- Inkscape probing and version detection
- Construction of the PDF + LaTeX export command
- Backend invocation
"""

from figtex.tools.inkscape import (
    BackendInfo,
    ExportMode,
    build_export_command,
    export_pdf_latex,
    probe_backend,
)

__all__ = [
    "BackendInfo",
    "ExportMode",
    "build_export_command",
    "export_pdf_latex",
    "probe_backend",
]
