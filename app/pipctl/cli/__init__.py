"""CLI package for pipctl.

This package contains the Typer application and all subcommands.
"""

from pipctl.cli.main import app

__all__ = ["app"]
