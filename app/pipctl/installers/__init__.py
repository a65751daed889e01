"""Package installers for executing install, update and uninstall actions.

This module provides the abstract Installer interface and the pip-backed
implementation.
"""

from pipctl.installers.base import (
    Installer,
    InstallerError,
    InstallerInvocationError,
    InstallerResult,
)
from pipctl.installers.pip import PipInstaller

__all__ = [
    "Installer",
    "InstallerError",
    "InstallerInvocationError",
    "InstallerResult",
    "PipInstaller",
]
