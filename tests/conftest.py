"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import threading
import time
from collections.abc import Callable
from pathlib import Path

import pytest
from pipctl.core.environment import PythonEnvironment
from pipctl.core.manifest import ManifestStore
from pipctl.core.progress import ProgressReporter
from pipctl.installers.base import Installer, InstallerInvocationError, InstallerResult
from pipctl.models.specifier import PackageSpecifier


class FakeInstaller(Installer):
    """Deterministic installer double.

    Packages listed in ``failures`` fail with a non-zero exit, packages in
    ``errors`` raise InstallerInvocationError, everything else succeeds.
    ``outputs`` replaces the installer output of a failing package.
    Tracks calls and the peak number of concurrent installs.
    """

    def __init__(
        self,
        failures: set[str] | None = None,
        errors: set[str] | None = None,
        delays: dict[str, float] | None = None,
        versions: dict[str, str] | None = None,
        outputs: dict[str, str] | None = None,
        dry_run: bool = False,
    ) -> None:
        super().__init__(dry_run=dry_run)
        self.failures = failures or set()
        self.errors = errors or set()
        self.delays = delays or {}
        self.versions = versions or {}
        self.outputs = outputs or {}
        self.calls: list[tuple[str, str]] = []
        self.active = 0
        self.peak = 0
        self._lock = threading.Lock()

    def _enter(self, op: str, name: str) -> None:
        with self._lock:
            self.calls.append((op, name))
            self.active += 1
            self.peak = max(self.peak, self.active)

    def _leave(self) -> None:
        with self._lock:
            self.active -= 1

    def _outcome(self, name: str, version: str | None) -> InstallerResult:
        if name in self.errors:
            msg = f"cannot start installer for {name}"
            raise InstallerInvocationError(msg)
        if name in self.failures:
            return InstallerResult(
                success=False,
                output=self.outputs.get(name, f"ERROR: No matching distribution found for {name}"),
                returncode=1,
            )
        return InstallerResult(success=True, version=version or self.versions.get(name, "1.0.0"))

    def install(self, spec: PackageSpecifier) -> InstallerResult:
        self._enter("install", spec.name)
        try:
            time.sleep(self.delays.get(spec.name, 0.0))
            return self._outcome(spec.name, spec.version)
        finally:
            self._leave()

    def update(self, name: str, version: str) -> InstallerResult:
        self._enter("update", name)
        try:
            return self._outcome(name, version)
        finally:
            self._leave()

    def uninstall(self, name: str) -> InstallerResult:
        self._enter("uninstall", name)
        try:
            return self._outcome(name, None)
        finally:
            self._leave()


@pytest.fixture
def make_installer() -> Callable[..., FakeInstaller]:
    """Factory for FakeInstaller instances."""
    return FakeInstaller


@pytest.fixture
def fake_installer() -> FakeInstaller:
    """FakeInstaller where every package succeeds."""
    return FakeInstaller()


@pytest.fixture
def manifest_path(tmp_path: Path) -> Path:
    """Manifest location inside a temporary environment prefix."""
    return tmp_path / "env" / "pipctl" / "manifest.toml"


@pytest.fixture
def store(manifest_path: Path) -> ManifestStore:
    """Loaded, empty ManifestStore."""
    manifest_store = ManifestStore(manifest_path)
    manifest_store.load()
    return manifest_store


@pytest.fixture
def silent_reporter() -> Callable[[], ProgressReporter]:
    """Factory for reporters that track state without drawing."""
    return lambda: ProgressReporter(disable=True)


@pytest.fixture
def python_env(tmp_path: Path) -> PythonEnvironment:
    """A fake Python environment rooted in tmp_path."""
    prefix = tmp_path / "env"
    prefix.mkdir(exist_ok=True)
    return PythonEnvironment(executable=prefix / "bin" / "python", prefix=prefix)


@pytest.fixture(autouse=True)
def _isolate_user_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from the real config directory and environment."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.delenv("PIPCTL_MANIFEST", raising=False)
    monkeypatch.delenv("PIPCTL_PYTHON", raising=False)
