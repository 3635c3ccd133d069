"""Restore command - reconcile an exported SVG against a label file."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from figtex.api import ConversionResult, FigureConverter
from figtex.config import Config
from figtex.exceptions import BackendNotFoundError, CatalogError, ConfigError
from figtex.labels.store import load_catalog
from figtex.tools.inkscape import ExportMode

console = Console()


@click.command()
@click.argument("raw_svg", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--labels",
    "labels_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Label file written with keep_labels",
)
@click.option(
    "--output",
    "-o",
    "output_base",
    type=click.Path(path_type=Path),
    help="Output base name (default: RAW_SVG without .svg, rewritten in place)",
)
@click.option("--no-pdf", is_flag=True, help="Only write the corrected SVG")
@click.option(
    "--export-mode",
    type=click.Choice([m.value for m in ExportMode]),
    help="Backend export area mode",
)
@click.option("--y-corr", type=float, help="Baseline correction as a fraction of font size")
@click.pass_context
def restore(
    ctx: click.Context,
    raw_svg: Path,
    labels_file: Path,
    output_base: Path | None,
    no_pdf: bool,
    export_mode: str | None,
    y_corr: float | None,
) -> None:
    """Restore labels in RAW_SVG and export it to PDF + LaTeX.

    RAW_SVG: SVG exported with placeholder labels.
    """
    config: Config = ctx.obj.get("config") or Config.load()

    try:
        config = config.replace(
            export_pdf=False if no_pdf else None,
            export_mode=export_mode,
            y_corr_factor=y_corr,
        )
        catalog = load_catalog(labels_file)
    except (ConfigError, CatalogError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1) from e

    markup = raw_svg.read_text(encoding="utf-8")
    converter = FigureConverter(config)

    try:
        with console.status("[bold green]Restoring labels..."):
            result = converter.restore(markup, catalog, output_base or raw_svg)
    except BackendNotFoundError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1) from e

    print_summary(result, len(catalog))


def print_summary(result: ConversionResult, label_count: int) -> None:
    table = Table(title="Conversion Summary")
    table.add_column("Item", style="cyan")
    table.add_column("Value", style="green")

    report = result.report
    if report is not None:
        table.add_row("Labels", str(label_count))
        table.add_row("Matched", str(report.matched))
        table.add_row("Unmanaged text nodes", str(report.unmanaged))
        table.add_row("Missing", str(len(report.missing)))
    table.add_row("SVG", str(result.svg_path))
    if result.pdf_path is not None:
        table.add_row("PDF", str(result.pdf_path))
    if result.pdf_tex_path is not None:
        table.add_row("PDF_TEX", str(result.pdf_tex_path))

    console.print(table)
    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {escape(warning)}")
    if result.success:
        console.print("[green]Done[/green]")
