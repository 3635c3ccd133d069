"""CLI commands for figtex."""

from figtex.cli.commands.check import check
from figtex.cli.commands.export import export
from figtex.cli.commands.restore import restore

__all__ = ["restore", "export", "check"]
