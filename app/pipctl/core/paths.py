"""Filesystem locations used by pipctl.

User settings and the theme override live in the XDG config directory
(``~/.config/pipctl`` unless ``XDG_CONFIG_HOME`` says otherwise). The
package manifest belongs to the environment it describes and lives under
that environment's prefix, so every virtual environment tracks its own
packages.
"""

import os
from pathlib import Path

APP_NAME = "pipctl"

MANIFEST_FILENAME = "manifest.toml"

# Overrides the manifest location for every command
MANIFEST_ENV_VAR = "PIPCTL_MANIFEST"


def get_config_dir() -> Path:
    """Directory holding config.toml and theme.toml."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / APP_NAME


def get_config_path() -> Path:
    """Path of the settings file."""
    return get_config_dir() / "config.toml"


def get_manifest_path(prefix: Path, override: Path | None = None) -> Path:
    """Resolve the manifest file for an environment.

    Args:
        prefix: The environment's ``sys.prefix``.
        override: Path from ``--manifest`` or the settings file, if any.

    Returns:
        ``override`` if given, else ``$PIPCTL_MANIFEST`` if set, else
        ``<prefix>/pipctl/manifest.toml``.
    """
    if override is not None:
        return override.expanduser()
    from_env = os.environ.get(MANIFEST_ENV_VAR)
    if from_env:
        return Path(from_env).expanduser()
    return prefix / APP_NAME / MANIFEST_FILENAME


def ensure_dir(path: Path, name: str) -> Path:
    """Create ``path`` and its parents if needed.

    Args:
        path: Directory to create.
        name: What the directory is for, used in the error message.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_config_dir() -> Path:
    """Create the config directory if needed and return it."""
    return ensure_dir(get_config_dir(), "config")
