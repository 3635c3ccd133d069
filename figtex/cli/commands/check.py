"""Check command - probe the configured backend."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from figtex.config import Config
from figtex.tools.inkscape import probe_backend

console = Console()


@click.command()
@click.option("--backend", help="Executable to probe instead of the configured one")
@click.pass_context
def check(ctx: click.Context, backend: str | None) -> None:
    """Check that the PDF + LaTeX backend is installed."""
    config: Config = ctx.obj.get("config") or Config.load()
    executable = backend or config.backend

    info = probe_backend(executable)

    table = Table(title="Backend")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Configured", executable)
    if info is None:
        table.add_row("Status", "[red]not found[/red]")
        console.print(table)
        console.print(
            "[yellow]Install Inkscape, set FIGTEX_INKSCAPE, or use --no-pdf for SVG-only output[/yellow]"
        )
        raise SystemExit(1)

    table.add_row("Status", "[green]OK[/green]")
    table.add_row("Executable", info.executable)
    table.add_row("Version", info.version or "unknown")
    table.add_row("Command style", "1.x" if info.modern else "0.9x (legacy)")
    table.add_row("Export mode", config.export_mode.value)
    console.print(table)
