"""Unit tests for theme module.

Tests for theme loading, validation, and Rich theme generation.
"""

from pathlib import Path

import pytest
from pipctl.core.theme import (
    ThemeColors,
    build_rich_theme,
    get_bundled_theme_path,
    get_theme,
    get_user_theme_path,
    load_theme,
    read_theme_file,
)
from pydantic import ValidationError
from rich.theme import Theme


def _write_user_theme(body: str) -> None:
    path = get_user_theme_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body)


class TestThemeColors:
    """Tests for ThemeColors Pydantic model."""

    def test_default_values(self) -> None:
        """ThemeColors has sensible defaults."""
        colors = ThemeColors()
        assert colors.text == "#ffffff"
        assert colors.success == "#03b971"
        assert colors.error == "#f53263"

    def test_short_hex_accepted(self) -> None:
        """ThemeColors accepts #RGB codes and trims whitespace."""
        assert ThemeColors(muted=" #abc ").muted == "#abc"

    def test_invalid_hex_no_hash(self) -> None:
        """ThemeColors rejects colors without # prefix."""
        with pytest.raises(ValidationError, match="must start with '#'"):
            ThemeColors(text="ffffff")

    def test_invalid_hex_wrong_length(self) -> None:
        """ThemeColors rejects colors with wrong length."""
        with pytest.raises(ValidationError, match="#RGB or #RRGGBB"):
            ThemeColors(progress_bar="#ff")

    def test_invalid_hex_chars(self) -> None:
        """ThemeColors rejects invalid hex characters."""
        with pytest.raises(ValidationError, match="invalid hex color"):
            ThemeColors(package_name="#gggggg")

    def test_extra_fields_forbidden(self) -> None:
        """ThemeColors rejects unknown fields."""
        with pytest.raises(ValidationError):
            ThemeColors(unknown_field="#ffffff")  # type: ignore[call-arg]


class TestReadThemeFile:
    """Tests for read_theme_file function."""

    def test_reads_colors_table(self, tmp_path: Path) -> None:
        """Colors are read from the [colors] table."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('[colors]\ntext = "#000000"\nwarning = "#aabbcc"\n')

        assert read_theme_file(theme_file) == {"text": "#000000", "warning": "#aabbcc"}

    def test_missing_file(self, tmp_path: Path) -> None:
        """Returns None for a missing file."""
        assert read_theme_file(tmp_path / "missing.toml") is None

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Returns None for broken TOML."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text("[colors\n")

        assert read_theme_file(theme_file) is None

    def test_colors_not_a_table(self, tmp_path: Path) -> None:
        """Returns None when colors is not a table."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('colors = "red"\n')

        assert read_theme_file(theme_file) is None

    def test_non_string_values_skipped(self, tmp_path: Path) -> None:
        """Non-string entries are ignored."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('[colors]\ntext = "#000000"\nmuted = 5\n')

        assert read_theme_file(theme_file) == {"text": "#000000"}


class TestLoadTheme:
    """Tests for load_theme function."""

    def test_bundled_theme_is_valid(self) -> None:
        """The bundled theme ships with the package and validates."""
        bundled = read_theme_file(get_bundled_theme_path())

        assert bundled
        ThemeColors.model_validate(bundled)

    def test_user_override_merges(self) -> None:
        """User colors override individual bundled colors."""
        _write_user_theme('[colors]\nerror = "#123456"\n')

        colors = load_theme()

        assert colors.error == "#123456"
        assert colors.success == ThemeColors().success

    def test_invalid_user_theme_falls_back(self) -> None:
        """Invalid user colors fall back to defaults."""
        _write_user_theme('[colors]\nerror = "red"\n')

        assert load_theme() == ThemeColors()


class TestRichTheme:
    """Tests for Rich theme generation."""

    def test_styles_defined(self) -> None:
        """All styles used by the CLI are present."""
        theme = build_rich_theme(ThemeColors())

        for name in ("success", "warning", "error", "info", "package.name", "bar.complete"):
            assert name in theme.styles

    def test_get_theme_is_cached(self) -> None:
        """get_theme builds the theme only once."""
        first = get_theme()

        assert isinstance(first, Theme)
        assert get_theme() is first
