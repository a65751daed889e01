"""Console output helpers.

All user-facing output goes through two themed Rich consoles: ``console``
for results on stdout and ``err_console`` for errors, warnings and
spinners on stderr.
"""

import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pipctl.core.theme import get_theme


def _make_console(stderr: bool = False) -> Console:
    # Hex theme colors need truecolor; let Rich decide for pipes and files.
    stream = sys.stderr if stderr else sys.stdout
    return Console(
        theme=get_theme(),
        stderr=stderr,
        color_system="truecolor" if stream.isatty() else None,
    )


console = _make_console()
err_console = _make_console(stderr=True)


def create_package_table(title: str) -> Table:
    """Build an empty, zebra-striped table for manifest entries.

    Args:
        title: Table title.

    Returns:
        Table with Package, Version and Updated columns.
    """
    table = Table(
        title=title,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("Package", style="package.name", no_wrap=True)
    table.add_column("Version", style="package.version")
    table.add_column("Updated", style="muted")
    return table


def print_info(message: str) -> None:
    console.print(f"[info]{escape(message)}[/]")


def print_success(message: str) -> None:
    console.print(f"[success]{escape(message)}[/]")


def print_warning(message: str) -> None:
    err_console.print(f"[warning]Warning:[/] {escape(message)}")


def print_error(message: str) -> None:
    err_console.print(f"[error]Error:[/] {escape(message)}")
