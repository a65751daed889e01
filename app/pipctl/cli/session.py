"""Shared setup for CLI commands.

Resolves settings, the managed Python environment and its manifest once per
command invocation, turning failures into user-facing errors.
"""

from dataclasses import dataclass
from pathlib import Path

import typer

from pipctl.core.config import ConfigError, Settings, load_settings
from pipctl.core.environment import (
    EnvironmentNotFoundError,
    PythonEnvironment,
    locate_environment,
)
from pipctl.core.manifest import ManifestError, ManifestStore
from pipctl.core.paths import get_manifest_path
from pipctl.installers.pip import PipInstaller
from pipctl.utils.formatting import print_error, print_info


@dataclass(frozen=True, slots=True)
class Session:
    """Everything a command needs to act on one environment.

    Attributes:
        settings: Loaded user settings.
        environment: The managed Python environment.
        store: Loaded manifest for that environment.
        quiet: Whether non-essential output is suppressed.
    """

    settings: Settings
    environment: PythonEnvironment
    store: ManifestStore
    quiet: bool = False

    def installer(self, dry_run: bool = False) -> PipInstaller:
        """Create a pip installer for the managed environment."""
        return PipInstaller(
            self.environment,
            timeout=self.settings.install_timeout_seconds,
            dry_run=dry_run,
        )


def _options(ctx: typer.Context) -> dict[str, object]:
    root = ctx.find_root()
    return root.obj if isinstance(root.obj, dict) else {}


def require_settings() -> Settings:
    """Load settings or exit with an error message.

    Raises:
        typer.Exit: If the settings file is invalid.
    """
    try:
        return load_settings()
    except ConfigError as e:
        print_error(f"Failed to load settings: {e}")
        raise typer.Exit(code=1) from e


def open_session(ctx: typer.Context) -> Session:
    """Locate the environment and load its manifest, or exit.

    Args:
        ctx: Typer context carrying the global options.

    Returns:
        A ready Session.

    Raises:
        typer.Exit: If settings, environment or manifest cannot be loaded.
    """
    options = _options(ctx)
    settings = require_settings()

    python = options.get("python") or settings.effective_python
    try:
        environment = locate_environment(str(python) if python else None)
    except EnvironmentNotFoundError as e:
        print_error(str(e))
        print_info("Activate a virtual environment or pass --python.")
        raise typer.Exit(code=1) from e

    override = options.get("manifest") or settings.manifest_path
    manifest_path = get_manifest_path(
        environment.prefix,
        Path(str(override)) if override else None,
    )

    store = ManifestStore(manifest_path)
    try:
        store.load()
    except ManifestError as e:
        print_error(f"Failed to load manifest: {e}")
        raise typer.Exit(code=1) from e

    return Session(
        settings=settings,
        environment=environment,
        store=store,
        quiet=bool(options.get("quiet", False)),
    )
