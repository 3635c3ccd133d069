"""Inkscape backend: probing, command construction and invocation.

The backend turns the corrected SVG into ``<name>.pdf`` plus
``<name>.pdf_tex``. Inkscape 1.x and 0.9x take different export flags, so
the version is probed first.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from figtex.exceptions import BackendError

logger = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(r"Inkscape\s+(\d+(?:\.\d+)*)")
LEGACY_HELP_FLAGS = ("-export-area-drawing", "--export-latex", "--export-pdf")


class ExportMode(str, Enum):
    """Export area modes understood by the backend."""

    AREA_DRAWING = "export-area-drawing"
    AREA_PAGE = "export-area-page"
    # Inkscape 0.9x only
    AREA = "export-area"
    USE_HINTS = "export-use-hints"

    @property
    def legacy_only(self) -> bool:
        return self in (ExportMode.AREA, ExportMode.USE_HINTS)


@dataclass(frozen=True)
class BackendInfo:
    """A usable backend executable and its version."""

    executable: str
    version: str | None = None

    @property
    def major(self) -> int:
        if not self.version:
            return 0
        return int(self.version.split(".")[0])

    @property
    def modern(self) -> bool:
        return self.major >= 1


@dataclass
class ExportOutcome:
    command: list[str]
    pdf_path: Path
    pdf_tex_path: Path
    returncode: int | None = None
    output: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0 and self.pdf_path.exists() and self.pdf_tex_path.exists()


def _run(command: list[str]) -> subprocess.CompletedProcess:
    return subprocess.run(command, capture_output=True, text=True)


def probe_backend(executable: str) -> BackendInfo | None:
    """Check that ``executable`` is a working Inkscape.

    The ``--version`` probe is tried first; older releases are recognised by
    the export flags listed in their ``--help`` output.
    """
    resolved = shutil.which(executable) or executable

    try:
        result = _run([resolved, "--version"])
    except OSError as e:
        logger.debug("Backend probe failed for %s: %s", executable, e)
        return None

    output = (result.stdout or "") + (result.stderr or "")
    if result.returncode == 0 and "Inkscape" in output:
        match = VERSION_PATTERN.search(output)
        return BackendInfo(resolved, match.group(1) if match else None)

    try:
        result = _run([resolved, "--help"])
    except OSError:
        return None
    output = (result.stdout or "") + (result.stderr or "")
    if result.returncode in (0, 1) and all(flag in output for flag in LEGACY_HELP_FLAGS):
        return BackendInfo(resolved, "0")

    logger.debug("Backend %s did not identify as Inkscape: %s", executable, output[:200])
    return None


def build_export_command(
    backend: BackendInfo,
    svg_path: Path,
    pdf_path: Path,
    mode: ExportMode = ExportMode.AREA_DRAWING,
) -> list[str]:
    """Command line exporting ``svg_path`` to PDF + LaTeX."""
    mode = ExportMode(mode)
    if backend.modern:
        if mode.legacy_only:
            logger.warning(
                "Export mode %s is not supported by Inkscape %s; using %s",
                mode.value,
                backend.version,
                ExportMode.AREA_DRAWING.value,
            )
            mode = ExportMode.AREA_DRAWING
        return [
            backend.executable,
            str(svg_path),
            f"--export-filename={pdf_path}",
            "--export-latex",
            f"--{mode.value}",
        ]

    return [
        backend.executable,
        str(svg_path),
        "--export-pdf",
        str(pdf_path),
        "--export-latex",
        f"-{mode.value}",
    ]


def export_pdf_latex(
    backend: BackendInfo,
    svg_path: Path,
    mode: ExportMode = ExportMode.AREA_DRAWING,
) -> ExportOutcome:
    """Run the backend next to ``svg_path``.

    Raises:
        BackendError: The process could not be started, exited nonzero or
            left one of the expected files missing. Files that were produced
            are left in place.
    """
    svg_path = Path(svg_path)
    pdf_path = svg_path.with_suffix(".pdf")
    outcome = ExportOutcome(
        command=build_export_command(backend, svg_path, pdf_path, mode),
        pdf_path=pdf_path,
        pdf_tex_path=svg_path.with_suffix(".pdf_tex"),
    )

    logger.info("Running backend: %s", " ".join(outcome.command))
    try:
        result = _run(outcome.command)
    except OSError as e:
        raise BackendError(outcome.command, None, str(e)) from e

    outcome.returncode = result.returncode
    outcome.output = ((result.stdout or "") + (result.stderr or "")).strip()

    if not outcome.success:
        missing = [p.name for p in (outcome.pdf_path, outcome.pdf_tex_path) if not p.exists()]
        raise BackendError(
            outcome.command,
            outcome.returncode,
            outcome.output,
            details={"missing": ", ".join(missing) or "none"},
        )
    return outcome
