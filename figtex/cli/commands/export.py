"""Export command - run the backend on a finished SVG."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from figtex.config import Config
from figtex.exceptions import BackendError
from figtex.tools.inkscape import ExportMode, export_pdf_latex, probe_backend

console = Console()


@click.command()
@click.argument("svg_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--export-mode",
    type=click.Choice([m.value for m in ExportMode]),
    help="Backend export area mode",
)
@click.pass_context
def export(ctx: click.Context, svg_file: Path, export_mode: str | None) -> None:
    """Export SVG_FILE to .pdf and .pdf_tex next to it."""
    config: Config = ctx.obj.get("config") or Config.load()
    mode = ExportMode(export_mode) if export_mode else config.export_mode

    backend = probe_backend(config.backend)
    if backend is None:
        console.print(f"[red]Error:[/red] backend not found: {escape(config.backend)}")
        raise SystemExit(1)

    try:
        with console.status(f"[bold green]Exporting {svg_file.name}..."):
            outcome = export_pdf_latex(backend, svg_file, mode)
    except BackendError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        if e.output:
            console.print(f"[dim]{escape(e.output)}[/dim]")
        raise SystemExit(1) from e

    console.print(f"[green]Wrote:[/green] {outcome.pdf_path}")
    console.print(f"[green]Wrote:[/green] {outcome.pdf_tex_path}")
