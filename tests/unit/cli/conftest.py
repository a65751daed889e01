"""Fixtures for CLI command tests."""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from pipctl.core.environment import PythonEnvironment
from pipctl.utils.formatting import console, err_console


@pytest.fixture(autouse=True)
def _wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep long messages on one line so assertions can match them."""
    monkeypatch.setattr(console, "width", 500)
    monkeypatch.setattr(err_console, "width", 500)


@pytest.fixture
def cli_env(python_env: PythonEnvironment, fake_installer) -> Iterator[MagicMock]:
    """Point the CLI at a temporary environment backed by a FakeInstaller.

    Yields the patched PipInstaller class; its return_value is the fake.
    """
    with (
        patch("pipctl.cli.session.locate_environment", return_value=python_env),
        patch("pipctl.cli.session.PipInstaller", return_value=fake_installer) as installer_cls,
    ):
        yield installer_cls


@pytest.fixture
def cli_manifest(python_env: PythonEnvironment) -> Path:
    """Default manifest location of the temporary environment."""
    return python_env.prefix / "pipctl" / "manifest.toml"
