"""Unit tests for the installer interface."""

import pytest
from pipctl.installers.base import Installer, InstallerResult


class TestInstallerResult:
    """Tests for InstallerResult."""

    def test_success(self) -> None:
        """Successful results are not failed."""
        result = InstallerResult(success=True, version="1.0")

        assert result.failed is False

    def test_diagnostic_with_exit_code(self) -> None:
        """The diagnostic starts with the exit code and keeps the output."""
        result = InstallerResult(success=False, output="ERROR: boom", returncode=1)

        assert result.diagnostic == "installer exited with code 1\nERROR: boom"

    def test_diagnostic_without_exit(self) -> None:
        """A missing exit code means the installer never finished."""
        result = InstallerResult(success=False, returncode=None)

        assert result.diagnostic == "installer did not finish"


class TestInstaller:
    """Tests for the Installer base class."""

    def test_cannot_instantiate_abstract(self) -> None:
        """Installer requires install, update and uninstall."""
        with pytest.raises(TypeError):
            Installer()  # type: ignore[abstract]

    def test_dry_run_flag(self, make_installer) -> None:
        """dry_run is exposed read-only."""
        assert make_installer(dry_run=True).dry_run is True
        assert make_installer().dry_run is False
