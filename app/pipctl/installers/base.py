"""Abstract base class for package installers.

This module defines the Installer interface through which pipctl reaches
the external package installer. The orchestrator depends only on this
interface, so tests can substitute a deterministic fake.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from pipctl.models.specifier import PackageSpecifier


# Recorded when the installed version cannot be determined
UNKNOWN_VERSION = "unknown"


class InstallerError(Exception):
    """Base exception for installer errors."""


class InstallerInvocationError(InstallerError):
    """Raised when the installer process cannot be started at all."""


@dataclass(frozen=True, slots=True)
class InstallerResult:
    """Outcome of one installer invocation.

    Attributes:
        success: Whether the installer reported success.
        version: Installed version, when known.
        output: Tail of the installer's stdout/stderr.
        returncode: Installer exit code; None if it never exited (timeout).
    """

    success: bool
    version: str | None = None
    output: str = ""
    returncode: int | None = 0

    @property
    def failed(self) -> bool:
        """Check if the invocation failed."""
        return not self.success

    @property
    def diagnostic(self) -> str:
        """One-line-first description of a failure."""
        if self.returncode is None:
            header = "installer did not finish"
        else:
            header = f"installer exited with code {self.returncode}"
        if self.output:
            return f"{header}\n{self.output}"
        return header


class Installer(ABC):
    """Abstract base class for package installers.

    Every method blocks until the external installer has finished and
    handles exactly one package.

    Attributes:
        dry_run: If True, only simulate actions without executing them.

    Example:
        >>> installer = PipInstaller(environment)
        >>> result = installer.install(PackageSpecifier.parse("requests==2.32.3"))
        >>> result.success
        True
    """

    def __init__(self, dry_run: bool = False) -> None:
        """Initialize the installer.

        Args:
            dry_run: If True, only simulate actions without executing them.
        """
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        """Check if installer is in dry-run mode."""
        return self._dry_run

    @abstractmethod
    def install(self, spec: PackageSpecifier) -> InstallerResult:
        """Install a single package.

        Args:
            spec: Package to install, optionally pinned.

        Returns:
            InstallerResult with the installed version on success.

        Raises:
            InstallerInvocationError: If the installer cannot be started.
        """

    @abstractmethod
    def update(self, name: str, version: str) -> InstallerResult:
        """Install an exact version of an already installed package.

        Args:
            name: Package name.
            version: Target version.

        Returns:
            InstallerResult with the installed version on success.

        Raises:
            InstallerInvocationError: If the installer cannot be started.
        """

    @abstractmethod
    def uninstall(self, name: str) -> InstallerResult:
        """Uninstall a single package.

        Args:
            name: Package name.

        Returns:
            InstallerResult describing the outcome.

        Raises:
            InstallerInvocationError: If the installer cannot be started.
        """
