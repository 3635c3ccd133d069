"""CLI tests for the figtex command group.

Coverage: help output, configuration errors, ``check``, ``export`` and
``restore``. Backend probing and invocation are mocked.
"""

from __future__ import annotations

import importlib
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from figtex.cli.main import cli
from figtex.labels.catalog import LabelCatalog, LabelRecord
from figtex.labels.store import dump_catalog
from figtex.tools.inkscape import BackendInfo, ExportOutcome

# The command packages re-export functions under their module names.
check_module = importlib.import_module("figtex.cli.commands.check")
export_module = importlib.import_module("figtex.cli.commands.export")


@pytest.fixture
def runner(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    """CLI runner working in an empty directory (no stray figtex.yaml)."""
    monkeypatch.chdir(tmp_path)
    return CliRunner()


class TestCliGroup:
    """Test the top-level group."""

    def test_help_lists_commands(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("restore", "export", "check"):
            assert command in result.output

    def test_invalid_config_file(self, runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "bad.yaml"
        config.write_text("font_size_mode: huge\n", encoding="utf-8")
        result = runner.invoke(cli, ["--config", str(config), "check"])
        assert result.exit_code == 1
        assert "font_size_mode" in result.output


class TestCheckCommand:
    """Test ``figtex check``."""

    def test_backend_missing(self, runner: CliRunner) -> None:
        with patch.object(check_module, "probe_backend", return_value=None):
            result = runner.invoke(cli, ["check"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_backend_found(self, runner: CliRunner) -> None:
        info = BackendInfo("/usr/bin/inkscape", "1.3.2")
        with patch.object(check_module, "probe_backend", return_value=info) as probe:
            result = runner.invoke(cli, ["check", "--backend", "inkscape-beta"])
        assert result.exit_code == 0
        assert "1.3.2" in result.output
        probe.assert_called_once_with("inkscape-beta")


class TestExportCommand:
    """Test ``figtex export``."""

    def test_backend_missing(self, runner: CliRunner, tmp_path: Path) -> None:
        svg = tmp_path / "fig.svg"
        svg.write_text("<svg/>", encoding="utf-8")
        with patch.object(export_module, "probe_backend", return_value=None):
            result = runner.invoke(cli, ["export", str(svg)])
        assert result.exit_code == 1

    def test_export_runs_backend(self, runner: CliRunner, tmp_path: Path) -> None:
        svg = tmp_path / "fig.svg"
        svg.write_text("<svg/>", encoding="utf-8")
        outcome = ExportOutcome(["inkscape"], tmp_path / "fig.pdf", tmp_path / "fig.pdf_tex", 0)

        with (
            patch.object(export_module, "probe_backend", return_value=BackendInfo("inkscape", "1.3")),
            patch.object(export_module, "export_pdf_latex", return_value=outcome) as export,
        ):
            result = runner.invoke(cli, ["export", str(svg), "--export-mode", "export-area-page"])

        assert result.exit_code == 0, result.output
        assert export.call_args.args[2].value == "export-area-page"
        assert "Wrote" in result.output


class TestRestoreCommand:
    """Test ``figtex restore``."""

    def test_restore_svg_only(self, runner: CliRunner, tmp_path: Path, simple_svg_content: str) -> None:
        raw = tmp_path / "raw.svg"
        raw.write_text(simple_svg_content, encoding="utf-8")
        catalog = LabelCatalog()
        catalog.add(LabelRecord(placeholder="Velocity", original_text="$v$ in m/s"))
        labels = dump_catalog(catalog, tmp_path / "raw.labels.yaml")

        result = runner.invoke(
            cli,
            ["restore", str(raw), "--labels", str(labels), "--no-pdf", "-o", str(tmp_path / "out")],
        )

        assert result.exit_code == 0, result.output
        assert "Conversion Summary" in result.output
        assert ">$v$ in m/s</text>" in (tmp_path / "out.svg").read_text(encoding="utf-8")
        # The raw export is left alone when an output base is given.
        assert ">Velocity</text>" in raw.read_text(encoding="utf-8")

    def test_bad_label_file(self, runner: CliRunner, tmp_path: Path, simple_svg_content: str) -> None:
        raw = tmp_path / "raw.svg"
        raw.write_text(simple_svg_content, encoding="utf-8")
        labels = tmp_path / "labels.yaml"
        labels.write_text("version: 1\n", encoding="utf-8")

        result = runner.invoke(cli, ["restore", str(raw), "--labels", str(labels), "--no-pdf"])
        assert result.exit_code == 1
        assert "labels: required field is missing" in result.output

    def test_malformed_label_color(self, runner: CliRunner, tmp_path: Path, simple_svg_content: str) -> None:
        """A bad value in the label file is reported, not a traceback."""
        raw = tmp_path / "raw.svg"
        raw.write_text(simple_svg_content, encoding="utf-8")
        labels = tmp_path / "labels.yaml"
        labels.write_text(
            "labels:\n  - {placeholder: Velocity, text: v, color: [red, 0, 0]}\n", encoding="utf-8"
        )

        result = runner.invoke(cli, ["restore", str(raw), "--labels", str(labels), "--no-pdf"])
        assert result.exit_code == 1
        assert "color must be a list of 3 numbers" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)
