"""User settings for pipctl.

Settings are stored in ~/.config/pipctl/config.toml. Every key is
optional; a missing file means all defaults.

Example::

    parallel_jobs = 8
    install_timeout_seconds = 600
    python = "/opt/venvs/app/bin/python"
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pipctl.core.paths import get_config_path

logger = logging.getLogger(__name__)

DEFAULT_PARALLEL_JOBS = 4

DEFAULT_INSTALL_TIMEOUT = 900

# Environment variable that overrides the interpreter
PYTHON_ENV_VAR = "PIPCTL_PYTHON"


class Settings(BaseModel):
    """pipctl settings.

    Attributes:
        parallel_jobs: Default worker count for parallel installs.
        install_timeout_seconds: Per-package installer timeout; None disables it.
        python: Interpreter whose environment is managed. None means auto-detect.
        manifest_path: Manifest location. None means inside the environment.
    """

    model_config = ConfigDict(extra="forbid")

    parallel_jobs: Annotated[
        int,
        Field(ge=1, le=64, description="Default concurrency for --parallel (1-64)"),
    ] = DEFAULT_PARALLEL_JOBS
    install_timeout_seconds: Annotated[
        int | None,
        Field(ge=10, le=7200, description="Per-package timeout in seconds (10-7200)"),
    ] = DEFAULT_INSTALL_TIMEOUT
    python: Annotated[
        Path | None,
        Field(description="Python interpreter override"),
    ] = None
    manifest_path: Annotated[
        Path | None,
        Field(description="Manifest file override"),
    ] = None

    @property
    def effective_python(self) -> str | None:
        """Interpreter override, with PIPCTL_PYTHON taking priority."""
        from_env = os.environ.get(PYTHON_ENV_VAR)
        if from_env:
            return from_env
        if self.python is not None:
            return str(self.python.expanduser())
        return None


class ConfigError(Exception):
    """Base exception for settings errors."""


class ConfigParseError(ConfigError):
    """Raised when the settings file cannot be parsed."""


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from a TOML file.

    Args:
        path: Path to the settings file. If None, uses the default location.

    Returns:
        Validated Settings. Defaults if the file does not exist.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or the content is invalid.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        logger.debug("No settings file at %s, using defaults", config_path)
        return Settings()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read settings: {e}") from e

    try:
        return Settings.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid settings in {config_path}: {e}") from e


def save_settings(settings: Settings, path: Path | None = None) -> Path:
    """Save settings to a TOML file.

    The file is written atomically via a temporary file and os.replace().

    Args:
        settings: Settings to save.
        path: Destination. If None, uses the default location.

    Returns:
        Path where the settings were saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    data: dict[str, Any] = {
        key: str(value) if isinstance(value, Path) else value
        for key, value in settings.model_dump(exclude_none=True).items()
    }

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(tmp_path, config_path)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write settings: {e}") from e

    return config_path
