"""figtex command line entry point."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from figtex import __version__
from figtex.cli.commands import check, export, restore
from figtex.config import Config
from figtex.exceptions import ConfigError
from figtex.log import setup_logging

console = Console(stderr=True)


@click.group()
@click.version_option(__version__, prog_name="figtex")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML configuration file (default: ./figtex.yaml if present)",
)
@click.option("-v", "--verbose", count=True, help="More output (-vv for debug)")
@click.option("-q", "--quiet", is_flag=True, help="Only report errors")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: int, quiet: bool) -> None:
    """Turn figure SVG exports into PDF + LaTeX overlays."""
    ctx.ensure_object(dict)

    try:
        config = Config.load(config_path)
    except (ConfigError, FileNotFoundError) as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise SystemExit(1) from e

    if quiet:
        log_level = "ERROR"
    elif verbose >= 2:
        log_level = "DEBUG"
    elif verbose == 1:
        log_level = "INFO"
    else:
        log_level = config.log_level

    setup_logging(log_level)
    ctx.obj["config"] = config
    ctx.obj["log_level"] = log_level


cli.add_command(restore)
cli.add_command(export)
cli.add_command(check)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
