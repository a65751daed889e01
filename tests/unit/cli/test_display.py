"""Unit tests for cli/display.py.

Tests for the results table and summaries printed after install batches.
"""

import io
from unittest.mock import patch

import pytest
from pipctl.cli.display import (
    create_results_table,
    print_failure_details,
    print_line_errors,
    print_results_summary,
)
from pipctl.core.requirements import RequirementLineError
from pipctl.core.theme import get_theme
from pipctl.models.specifier import PackageSpecifier
from pipctl.models.task import InstallResult
from rich.console import Console


@pytest.fixture
def success_result() -> InstallResult:
    """A successful install result."""
    return InstallResult(
        index=0,
        specifier=PackageSpecifier("numpy", "1.26.4"),
        success=True,
        version="1.26.4",
        message="Installed numpy 1.26.4",
    )


@pytest.fixture
def failure_result() -> InstallResult:
    """A failed install result with multi-line diagnostics."""
    return InstallResult(
        index=1,
        specifier=PackageSpecifier("nope", "9.9"),
        success=False,
        error="installer exited with code 1\nERROR: No matching distribution found for nope==9.9",
    )


def _render(renderable: object) -> str:
    buf = io.StringIO()
    Console(theme=get_theme(), file=buf, color_system=None, width=200).print(renderable)
    return buf.getvalue()


def _test_console() -> tuple[Console, io.StringIO]:
    buf = io.StringIO()
    return Console(theme=get_theme(), file=buf, color_system=None, width=200), buf


class TestCreateResultsTable:
    """Tests for create_results_table."""

    def test_columns(self, success_result: InstallResult) -> None:
        """Table has Status, Package, Version and Message columns."""
        table = create_results_table([success_result])

        assert [col.header for col in table.columns] == ["Status", "Package", "Version", "Message"]

    def test_rows_in_given_order(
        self, success_result: InstallResult, failure_result: InstallResult
    ) -> None:
        """Rows follow the result order and show status markers."""
        output = _render(create_results_table([success_result, failure_result]))

        assert output.index("numpy") < output.index("nope")
        assert "OK" in output
        assert "FAIL" in output
        assert "Installed numpy 1.26.4" in output

    def test_failure_shows_first_line_only(self, failure_result: InstallResult) -> None:
        """Only the first diagnostic line goes into the table."""
        output = _render(create_results_table([failure_result]))

        assert "installer exited with code 1" in output
        assert "No matching distribution" not in output

    def test_dry_run_title(self, success_result: InstallResult) -> None:
        """Dry-run tables say so in the title."""
        assert create_results_table([success_result], dry_run=True).title == "Results (Dry Run)"
        assert create_results_table([success_result]).title == "Results"


class TestSummaries:
    """Tests for printed summaries."""

    def test_results_summary_counts(
        self, success_result: InstallResult, failure_result: InstallResult
    ) -> None:
        """The summary counts successes and failures."""
        test_console, buf = _test_console()
        with patch("pipctl.cli.display.console", test_console):
            print_results_summary([success_result, failure_result, success_result])

        assert "Summary: 2 succeeded, 1 failed" in buf.getvalue()

    def test_results_summary_no_failures(self, success_result: InstallResult) -> None:
        """A clean batch reports zero failures."""
        test_console, buf = _test_console()
        with patch("pipctl.cli.display.console", test_console):
            print_results_summary([success_result])

        assert "Summary: 1 succeeded, 0 failed" in buf.getvalue()

    def test_failure_details(
        self, success_result: InstallResult, failure_result: InstallResult
    ) -> None:
        """Full diagnostics are printed for failed results only."""
        test_console, buf = _test_console()
        with patch("pipctl.cli.display.err_console", test_console):
            print_failure_details([success_result, failure_result])

        output = buf.getvalue()
        assert "nope==9.9" in output
        assert "No matching distribution found" in output
        assert "numpy" not in output

    def test_line_errors(self) -> None:
        """Every rejected line is listed."""
        errors = [
            RequirementLineError(2, "==1.0", "package name cannot be empty"),
            RequirementLineError(5, "x==", "version cannot be empty"),
        ]
        test_console, buf = _test_console()
        with patch("pipctl.cli.display.err_console", test_console):
            print_line_errors("requirements.txt", errors)

        output = buf.getvalue()
        assert "2 invalid line(s) in requirements.txt" in output
        assert "line 2: '==1.0'" in output
        assert "line 5: 'x=='" in output


class TestBracketedText:
    """Installer output containing square brackets is printed verbatim."""

    def _failure(self, error: str) -> InstallResult:
        return InstallResult(
            index=0, specifier=PackageSpecifier("pkg"), success=False, error=error
        )

    def test_pip_end_of_output_marker_kept(self) -> None:
        """pip's '[end of output]' line is not swallowed as markup."""
        error = (
            "installer exited with code 1\n"
            "  error: subprocess-exited-with-error\n"
            "      [end of output]\n"
            "  note: This error originates from a subprocess"
        )
        test_console, buf = _test_console()
        with patch("pipctl.cli.display.err_console", test_console):
            print_failure_details([self._failure(error)])

        assert "[end of output]" in buf.getvalue()

    def test_closing_tag_lookalike_in_details(self) -> None:
        """A '[/path]' fragment does not break the failure details."""
        error = "installer exited with code 1\nerror: could not copy [/tmp/build] to site-packages"
        test_console, buf = _test_console()
        with patch("pipctl.cli.display.err_console", test_console):
            print_failure_details([self._failure(error)])

        assert "could not copy [/tmp/build] to site-packages" in buf.getvalue()

    def test_closing_tag_lookalike_in_table(self) -> None:
        """The first diagnostic line is shown as plain text in the table."""
        output = _render(create_results_table([self._failure("failed near [/tmp/build]")]))

        assert "failed near [/tmp/build]" in output

    def test_line_error_with_brackets(self) -> None:
        """Rejected requirements lines are printed as written."""
        errors = [RequirementLineError(3, "[/x]", "invalid package name")]
        test_console, buf = _test_console()
        with patch("pipctl.cli.display.err_console", test_console):
            print_line_errors("reqs[/dev].txt", errors)

        output = buf.getvalue()
        assert "reqs[/dev].txt" in output
        assert "'[/x]'" in output
