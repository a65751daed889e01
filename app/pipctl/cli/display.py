"""Shared Rich display functions for install results.

Provides the results table and summary line printed after every install
batch, plus rendering of specifier parse errors.
"""

from rich.markup import escape
from rich.table import Table

from pipctl.core.requirements import RequirementLineError
from pipctl.models.task import InstallResult
from pipctl.utils.formatting import console, err_console


def create_results_table(results: list[InstallResult], dry_run: bool = False) -> Table:
    """Create a Rich table displaying install results.

    Successful results show "OK" status with the recorded version; failed
    results show "FAIL" with the first line of the installer diagnostics.

    Args:
        results: Results in submission order.
        dry_run: Whether this was a dry-run (changes table title).

    Returns:
        Rich Table configured for results display.
    """
    table = Table(
        title="Results (Dry Run)" if dry_run else "Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=6, justify="center")
    table.add_column("Package", no_wrap=True)
    table.add_column("Version")
    table.add_column("Message")

    for result in results:
        if result.success:
            status = "[success]OK[/success]"
            message = result.message or ""
        else:
            status = "[error]FAIL[/error]"
            message = (result.error or "Unknown error").splitlines()[0]

        table.add_row(
            status,
            f"[package.name]{escape(result.specifier.name)}[/]",
            f"[package.version]{escape(result.version or result.specifier.version or '-')}[/]",
            f"[muted]{escape(message)}[/muted]",
        )

    return table


def print_failure_details(results: list[InstallResult]) -> None:
    """Print the full installer diagnostics of every failed result."""
    for result in results:
        if result.failed and result.error and "\n" in result.error:
            err_console.print(f"\n[error]{escape(str(result.specifier))}[/error]")
            err_console.print(f"[muted]{escape(result.error)}[/muted]", highlight=False)


def print_results_summary(results: list[InstallResult]) -> None:
    """Print the one-line aggregate of a batch.

    Args:
        results: Results of the batch.
    """
    success_count = sum(1 for r in results if r.success)
    fail_count = sum(1 for r in results if r.failed)

    console.print(
        f"\nSummary: [success]{success_count} succeeded[/success], "
        f"[error]{fail_count} failed[/error]"
        if fail_count
        else f"\nSummary: [success]{success_count} succeeded[/success], 0 failed"
    )


def print_line_errors(source: str, errors: list[RequirementLineError]) -> None:
    """Print every rejected requirements line."""
    err_console.print(f"[error]Error:[/] {len(errors)} invalid line(s) in {escape(source)}")
    for error in errors:
        err_console.print(f"  [muted]{escape(str(error))}[/muted]", highlight=False)
