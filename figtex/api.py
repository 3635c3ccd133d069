"""High-level conversion API.

FigureConverter runs the whole pipeline for one figure::

    scene  -> placeholders -> host SVG export -> <base>.svg (raw)
           -> retokenize -> reconcile labels -> fix legends/background
           -> <base>.svg (corrected) -> backend -> <base>.pdf + <base>.pdf_tex

Only a missing backend (before anything is written) and a failing scene
export are fatal. Everything after the raw SVG is on disk ends up in
ConversionResult.warnings.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from figtex.config import Config
from figtex.exceptions import BackendError, BackendNotFoundError, SceneExportError
from figtex.labels.catalog import LabelCatalog
from figtex.labels.formatter import LabelFormatter
from figtex.labels.registry import LabelRegistry
from figtex.labels.store import dump_catalog
from figtex.scene.base import SceneSource
from figtex.scene.mutator import SceneMutator
from figtex.svg.anchor import DEFAULT_ESTIMATOR, WidthEstimator
from figtex.svg.background import remove_white_background
from figtex.svg.legend import LegendAdapter, LegendSnapshot, correct_legends
from figtex.svg.matcher import ReconcileReport, TextNodeMatcher
from figtex.svg.retokenizer import retokenize
from figtex.tools.inkscape import BackendInfo, export_pdf_latex, probe_backend

logger = logging.getLogger(__name__)

LABELS_SUFFIX = ".labels.yaml"


@dataclass
class ConversionResult:
    """Outcome of one conversion.

    ``svg_path`` always points at a file: the corrected SVG, or the raw
    export when the rewrite could not be written. ``pdf_path`` and
    ``pdf_tex_path`` are set only for files that exist.
    """

    svg_path: Path
    pdf_path: Path | None = None
    pdf_tex_path: Path | None = None
    labels_path: Path | None = None
    rewritten: bool = False
    report: ReconcileReport | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.rewritten and not self.warnings


def base_path(output_base: Path | str) -> Path:
    """Output base without a trailing ``.svg``."""
    base = Path(output_base)
    return base.with_suffix("") if base.suffix.lower() == ".svg" else base


class FigureConverter:
    """Converts host figures to SVG and PDF + LaTeX.

    Args:
        config: Conversion options (defaults to Config.load()).
        estimator: Width estimator for auto-anchored labels.
        legend_adapter: Legend correction strategy for the exporter in use.
    """

    def __init__(
        self,
        config: Config | None = None,
        *,
        estimator: WidthEstimator = DEFAULT_ESTIMATOR,
        legend_adapter: LegendAdapter | None = None,
    ) -> None:
        self.config = config or Config.load()
        self.estimator = estimator
        self.legend_adapter = legend_adapter
        self.registry = LabelRegistry()

    def check_backend(self) -> BackendInfo | None:
        """Probe the backend; None in SVG-only mode.

        Raises:
            BackendNotFoundError: PDF export is on and the backend is unusable.
        """
        if not self.config.export_pdf:
            return None
        backend = probe_backend(self.config.backend)
        if backend is None:
            raise BackendNotFoundError(self.config.backend)
        logger.debug("Using backend %s (version %s)", backend.executable, backend.version)
        return backend

    def convert(self, scene: SceneSource, output_base: Path | str) -> ConversionResult:
        """Export ``scene`` to ``<output_base>.svg`` and, unless disabled,
        ``<output_base>.pdf`` plus ``<output_base>.pdf_tex``.

        Raises:
            BackendNotFoundError: Before anything is written.
            SceneExportError: The scene could not be traversed or exported.
        """
        backend = self.check_backend()
        base = base_path(output_base)

        self.registry.reset()
        mutator = SceneMutator(
            scene,
            self.registry,
            label_mode=self.config.label_mode,
            legend_label_mode=self.config.legend_label_mode,
        )
        try:
            catalog = mutator.populate()
            mutator.apply()
            markup = scene.export_svg()
        except SceneExportError:
            raise
        except Exception as e:
            raise SceneExportError(f"Scene export failed: {e}") from e
        finally:
            mutator.restore()

        if not isinstance(markup, str):
            raise SceneExportError(f"Exporter returned {type(markup).__name__}, expected SVG markup")

        return self._finish(markup, catalog, base, mutator.snapshots, backend)

    def restore(
        self,
        markup: str,
        catalog: LabelCatalog,
        output_base: Path | str,
        snapshots: Iterable[LegendSnapshot] = (),
    ) -> ConversionResult:
        """Reconcile an SVG exported earlier against a stored catalog."""
        backend = self.check_backend()
        return self._finish(markup, catalog, base_path(output_base), list(snapshots), backend)

    def _finish(
        self,
        markup: str,
        catalog: LabelCatalog,
        base: Path,
        snapshots: list[LegendSnapshot],
        backend: BackendInfo | None,
    ) -> ConversionResult:
        config = self.config
        svg_path = Path(f"{base}.svg")
        svg_path.parent.mkdir(parents=True, exist_ok=True)
        svg_path.write_text(markup, encoding="utf-8")
        logger.info("Wrote raw export to %s", svg_path)

        result = ConversionResult(svg_path=svg_path)

        catalog.finalize(LabelFormatter.from_config(config))
        document = retokenize(markup, config.max_line_length)

        matcher = TextNodeMatcher(
            catalog,
            y_corr_factor=config.y_corr_factor,
            squish_factor=config.squish_factor if config.squished_text else None,
            estimator=self.estimator,
        )
        result.report = matcher.reconcile(document)
        for message in result.report.warnings():
            _warn(result, message)

        corrections = correct_legends(
            document, snapshots, catalog, config.legend_padding, self.legend_adapter
        )
        corrected = {c.group for c in corrections}
        for snapshot in snapshots:
            if snapshot.vertical and snapshot.boxed and snapshot.group not in corrected:
                _warn(result, f"Legend {snapshot.group}: box not found in export, left as exported")

        if config.remove_white_background and not remove_white_background(document):
            _warn(result, "No white page background found to remove")

        problem = document.check_well_formed()
        if problem:
            _warn(result, f"Corrected SVG is not well-formed: {problem}")

        result.rewritten = _write_atomic(svg_path, document.serialize(), result)

        if config.keep_labels:
            labels_path = Path(f"{base}{LABELS_SUFFIX}")
            try:
                result.labels_path = dump_catalog(catalog, labels_path)
            except OSError as e:
                _warn(result, f"Could not write label file {labels_path}: {e}")

        if backend is not None:
            self._run_backend(backend, svg_path, result)
        return result

    def _run_backend(self, backend: BackendInfo, svg_path: Path, result: ConversionResult) -> None:
        try:
            outcome = export_pdf_latex(backend, svg_path, self.config.export_mode)
        except BackendError as e:
            message = f"No .pdf or .pdf_tex file produced: {e}"
            if e.output:
                message += f"\n{e.output}"
            _warn(result, message)
            pdf_path = svg_path.with_suffix(".pdf")
            pdf_tex_path = svg_path.with_suffix(".pdf_tex")
        else:
            pdf_path, pdf_tex_path = outcome.pdf_path, outcome.pdf_tex_path

        result.pdf_path = pdf_path if pdf_path.exists() else None
        result.pdf_tex_path = pdf_tex_path if pdf_tex_path.exists() else None


def _warn(result: ConversionResult, message: str) -> None:
    logger.warning(message)
    result.warnings.append(message)


def _write_atomic(path: Path, content: str, result: ConversionResult) -> bool:
    """Replace ``path`` with ``content`` via a temporary file in the same
    directory. On failure the existing file is kept and a warning recorded."""
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.stem}.",
            suffix=".svg.tmp",
            delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(content)
        # Keep the permissions of the file being replaced.
        if path.exists():
            os.chmod(tmp_name, stat.S_IMODE(path.stat().st_mode))
        os.replace(tmp_name, path)
    except OSError as e:
        _warn(result, f"Could not write corrected SVG, keeping raw export: {e}")
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        return False

    logger.info("Wrote corrected SVG to %s", path)
    return True


def convert(
    scene: SceneSource,
    output_base: Path | str,
    config: Config | None = None,
    **kwargs,
) -> ConversionResult:
    """Convert ``scene`` with a one-off FigureConverter."""
    return FigureConverter(config, **kwargs).convert(scene, output_base)
