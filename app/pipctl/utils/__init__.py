"""Utility modules for pipctl.

This module exports commonly used utility functions.
"""

from pipctl.utils.formatting import (
    console,
    create_package_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from pipctl.utils.shell import CommandResult, run_command, tail

__all__ = [
    "CommandResult",
    "console",
    "create_package_table",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
    "tail",
]
