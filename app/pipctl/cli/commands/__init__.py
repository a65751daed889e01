"""CLI commands for pipctl.

This package contains all subcommand implementations.
"""

from pipctl.cli.commands import config, delete, install, list, update

__all__ = ["config", "delete", "install", "list", "update"]
