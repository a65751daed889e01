"""pip installer implementation.

Installs, updates and uninstalls packages by running ``<python> -m pip``
against the managed environment, one package per invocation.
"""

import logging
import subprocess

from pipctl.core.environment import PythonEnvironment
from pipctl.installers.base import (
    UNKNOWN_VERSION,
    Installer,
    InstallerInvocationError,
    InstallerResult,
)
from pipctl.models.specifier import PackageSpecifier
from pipctl.utils.shell import CommandResult, run_command, tail

logger = logging.getLogger(__name__)


class PipInstaller(Installer):
    """Installer backed by ``python -m pip``.

    Attributes:
        environment: Environment whose interpreter runs pip.
        timeout: Per-invocation timeout in seconds; None waits forever.
        dry_run: If True, installs use ``pip install --dry-run`` and
            uninstalls are skipped.
    """

    # Timeout for pip show (version lookup only)
    _SHOW_TIMEOUT: float = 60.0

    def __init__(
        self,
        environment: PythonEnvironment,
        *,
        timeout: float | None = 900.0,
        dry_run: bool = False,
    ) -> None:
        super().__init__(dry_run=dry_run)
        self._environment = environment
        self._timeout = timeout

    @property
    def environment(self) -> PythonEnvironment:
        """Environment managed by this installer."""
        return self._environment

    def install(self, spec: PackageSpecifier) -> InstallerResult:
        """Install a package with ``pip install``.

        Unpinned installs look up the resulting version with ``pip show``.
        """
        args = ["install", spec.requirement]
        if self.dry_run:
            args.append("--dry-run")

        result = self._run_pip(args, timeout=self._timeout)
        if isinstance(result, InstallerResult):
            return result
        if not result.success:
            return self._failure(result)

        if self.dry_run:
            version = spec.version or UNKNOWN_VERSION
        else:
            version = spec.version or self.installed_version(spec.name) or UNKNOWN_VERSION
        return InstallerResult(success=True, version=version, output=tail(result.stdout))

    def update(self, name: str, version: str) -> InstallerResult:
        """Move a package to an exact version with ``pip install --upgrade``."""
        spec = PackageSpecifier(name=name, version=version)
        args = ["install", "--upgrade", spec.requirement]
        if self.dry_run:
            args.append("--dry-run")

        result = self._run_pip(args, timeout=self._timeout)
        if isinstance(result, InstallerResult):
            return result
        if not result.success:
            return self._failure(result)

        installed = version if self.dry_run else self.installed_version(name)
        return InstallerResult(
            success=True,
            version=installed or version,
            output=tail(result.stdout),
        )

    def uninstall(self, name: str) -> InstallerResult:
        """Remove a package with ``pip uninstall -y``."""
        if self.dry_run:
            logger.info("Dry-run: skipping uninstall of %s", name)
            return InstallerResult(success=True, output="Dry-run: nothing removed")

        result = self._run_pip(["uninstall", "-y", name], timeout=self._timeout)
        if isinstance(result, InstallerResult):
            return result
        if not result.success:
            return self._failure(result)

        # pip exits 0 with a warning when the package was not installed
        if "WARNING: Skipping" in result.stderr:
            return InstallerResult(success=True, output=tail(result.stderr))
        return InstallerResult(success=True, output=tail(result.stdout))

    def installed_version(self, name: str) -> str | None:
        """Query the installed version of a package with ``pip show``.

        Args:
            name: Package name.

        Returns:
            Version string, or None if the package is not installed or the
            lookup failed.
        """
        try:
            result = self._run_pip(["show", name], timeout=self._SHOW_TIMEOUT)
        except InstallerInvocationError as e:
            logger.warning("Could not query version of %s: %s", name, e)
            return None
        if isinstance(result, InstallerResult) or not result.success:
            return None

        for line in result.stdout.splitlines():
            if line.startswith("Version:"):
                return line.removeprefix("Version:").strip() or None
        return None

    def _run_pip(self, args: list[str], *, timeout: float | None) -> CommandResult | InstallerResult:
        """Run pip with the given arguments.

        Returns:
            CommandResult when pip ran to completion, or a failed
            InstallerResult when it timed out.

        Raises:
            InstallerInvocationError: If the interpreter cannot be started.
        """
        command = [
            str(self._environment.executable),
            "-m",
            "pip",
            *args,
            "--disable-pip-version-check",
            "--no-input",
        ]
        logger.info("Executing: %s", " ".join(command))

        try:
            return run_command(command, timeout=timeout)
        except subprocess.TimeoutExpired as e:
            logger.warning("pip %s timed out after %ss", args[0], timeout)
            output = e.stderr if isinstance(e.stderr, str) else ""
            return InstallerResult(
                success=False,
                output=tail(output) or f"timed out after {timeout}s",
                returncode=None,
            )
        except (FileNotFoundError, PermissionError) as e:
            msg = f"Cannot run {self._environment.executable}: {e}"
            raise InstallerInvocationError(msg) from e
        except OSError as e:
            msg = f"Failed to start pip: {e}"
            raise InstallerInvocationError(msg) from e

    @staticmethod
    def _failure(result: CommandResult) -> InstallerResult:
        output = tail(result.stderr) or tail(result.stdout)
        return InstallerResult(success=False, output=output, returncode=result.returncode)
