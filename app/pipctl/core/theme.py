"""Color theme for pipctl output.

The bundled ``data/theme.toml`` defines every color. A user file at
``~/.config/pipctl/theme.toml`` may override any subset of them; a broken
user file is ignored with a warning rather than breaking the CLI.
"""

import logging
import tomllib
from functools import cache
from importlib import resources
from pathlib import Path
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, ValidationError
from rich.theme import Theme

from pipctl.core.paths import get_config_dir

logger = logging.getLogger(__name__)


def _check_hex(value: str) -> str:
    color = value.strip()
    if not color.startswith("#"):
        msg = f"color must start with '#', got {value!r}"
        raise ValueError(msg)
    digits = color[1:]
    if len(digits) not in (3, 6):
        msg = f"color must be #RGB or #RRGGBB, got {value!r}"
        raise ValueError(msg)
    if any(c not in "0123456789abcdefABCDEF" for c in digits):
        msg = f"invalid hex color {value!r}"
        raise ValueError(msg)
    return color


HexColor = Annotated[str, AfterValidator(_check_hex)]


class ThemeColors(BaseModel):
    """Named colors used by the CLI, as ``#RGB`` or ``#RRGGBB``."""

    model_config = ConfigDict(extra="forbid")

    text: HexColor = "#ffffff"
    muted: HexColor = "#b2bec3"
    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"

    success: HexColor = "#03b971"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"

    package_name: HexColor = "#69B9A1"
    package_version: HexColor = "#b2bec3"

    progress_bar: HexColor = "#0e8ac8"
    progress_done: HexColor = "#03b971"


def get_user_theme_path() -> Path:
    """Location of the optional user theme override."""
    return get_config_dir() / "theme.toml"


def get_bundled_theme_path() -> Path:
    """Location of the theme shipped inside the package."""
    return Path(str(resources.files("pipctl.data").joinpath("theme.toml")))


def read_theme_file(path: Path) -> dict[str, str] | None:
    """Read the ``[colors]`` table of a theme file.

    Args:
        path: Theme TOML file.

    Returns:
        String-valued colors by name, or None if the file is missing or
        unusable. Non-string values are dropped.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return None
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return None

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", path)
        return None
    return {name: value for name, value in colors.items() if isinstance(value, str)}


def load_theme() -> ThemeColors:
    """Merge the bundled colors with the user's overrides.

    Returns:
        Validated colors; the built-in defaults if validation fails.
    """
    colors = read_theme_file(get_bundled_theme_path())
    if colors is None:
        logger.error("Bundled theme is missing; the installation may be damaged")
        colors = {}

    overrides = read_theme_file(get_user_theme_path())
    if overrides:
        logger.debug("Applying %d user color override(s)", len(overrides))
        colors.update(overrides)

    try:
        return ThemeColors.model_validate(colors)
    except ValidationError as e:
        logger.warning("Invalid theme colors, falling back to defaults: %s", e)
        return ThemeColors()


def build_rich_theme(colors: ThemeColors) -> Theme:
    """Map theme colors onto the Rich style names used in markup."""
    return Theme(
        {
            "text": colors.text,
            "muted": colors.muted,
            "header": colors.header,
            "bold_header": f"bold {colors.header}",
            "border": colors.border,
            "success": colors.success,
            "warning": colors.warning,
            "error": f"bold {colors.error}",
            "info": colors.info,
            "package.name": f"bold {colors.package_name}",
            "package.version": colors.package_version,
            "progress.description": colors.text,
            "bar.back": colors.border,
            "bar.complete": colors.progress_bar,
            "bar.finished": colors.progress_done,
        }
    )


@cache
def get_theme() -> Theme:
    """Rich theme for the shared consoles, built once per process."""
    return build_rich_theme(load_theme())
