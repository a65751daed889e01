"""Unit tests for requirements file parsing."""

from pathlib import Path

import pytest
from pipctl.core.requirements import (
    RequirementsFileError,
    RequirementsParseError,
    parse_requirements,
    read_requirements,
)
from pipctl.models.specifier import PackageSpecifier


class TestParseRequirements:
    """Tests for parse_requirements function."""

    def test_parses_lines_in_order(self) -> None:
        """Specifiers keep file order."""
        result = parse_requirements("numpy==1.26.4\nrequests\nflask==3.0.3\n")

        assert result == [
            PackageSpecifier("numpy", "1.26.4"),
            PackageSpecifier("requests"),
            PackageSpecifier("flask", "3.0.3"),
        ]

    def test_skips_blank_lines_and_comments(self) -> None:
        """Blank lines and full-line comments are ignored."""
        text = "# pinned deps\n\n   \nrich==13.7.1\n  # indented comment\n"

        assert parse_requirements(text) == [PackageSpecifier("rich", "13.7.1")]

    def test_strips_inline_comments(self) -> None:
        """Trailing comments after whitespace are removed."""
        text = "rich==13.7.1  # terminal output\ntyper\t# cli\n"

        assert parse_requirements(text) == [
            PackageSpecifier("rich", "13.7.1"),
            PackageSpecifier("typer"),
        ]

    def test_empty_text(self) -> None:
        """An empty file yields no specifiers."""
        assert parse_requirements("") == []

    def test_collects_every_bad_line(self) -> None:
        """All malformed lines are reported together."""
        text = "good\n==1.0\nalso-good\npkg==\n"

        with pytest.raises(RequirementsParseError) as exc_info:
            parse_requirements(text, source="reqs.txt")

        errors = exc_info.value.errors
        assert [e.line_number for e in errors] == [2, 4]
        assert errors[0].content == "==1.0"
        assert str(errors[1]).startswith("line 4: 'pkg=='")
        assert "2 invalid line(s) in reqs.txt" in str(exc_info.value)


class TestReadRequirements:
    """Tests for read_requirements function."""

    def test_reads_file(self, tmp_path: Path) -> None:
        """Specifiers are read from disk."""
        path = tmp_path / "requirements.txt"
        path.write_text("pydantic==2.7.1\n")

        assert read_requirements(path) == [PackageSpecifier("pydantic", "2.7.1")]

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file raises RequirementsFileError."""
        with pytest.raises(RequirementsFileError, match="not found"):
            read_requirements(tmp_path / "missing.txt")

    def test_error_names_file(self, tmp_path: Path) -> None:
        """Parse errors carry the file path as source."""
        path = tmp_path / "requirements.txt"
        path.write_text("bad name\n")

        with pytest.raises(RequirementsParseError) as exc_info:
            read_requirements(path)

        assert exc_info.value.source == str(path)
