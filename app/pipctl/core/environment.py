"""Python environment discovery.

Locates the interpreter whose environment pipctl manages and asks it for
its executable path and installation prefix.
"""

import logging
import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

from pipctl.utils.shell import run_command

logger = logging.getLogger(__name__)

# Interpreter names tried in order when nothing else is configured
PYTHON_CANDIDATES: tuple[str, ...] = ("python3", "python", "py")

_PROBE_SCRIPT = "import sys; print(sys.executable); print(sys.prefix)"

_PROBE_TIMEOUT = 15.0


class EnvironmentNotFoundError(Exception):
    """Raised when no usable Python interpreter can be found."""


@dataclass(frozen=True, slots=True)
class PythonEnvironment:
    """An interpreter and the environment it installs into.

    Attributes:
        executable: Absolute path of the interpreter.
        prefix: The interpreter's ``sys.prefix``.
    """

    executable: Path
    prefix: Path


def probe_interpreter(command: str) -> PythonEnvironment | None:
    """Ask an interpreter for its executable and prefix.

    Args:
        command: Interpreter name or path.

    Returns:
        PythonEnvironment, or None if the interpreter is missing or broken.
    """
    try:
        result = run_command([command, "-c", _PROBE_SCRIPT], timeout=_PROBE_TIMEOUT)
    except (FileNotFoundError, PermissionError, subprocess.TimeoutExpired, OSError) as e:
        logger.debug("Interpreter %s unusable: %s", command, e)
        return None

    if not result.success:
        logger.debug("Interpreter %s exited with %d", command, result.returncode)
        return None

    lines = result.stdout.strip().splitlines()
    if len(lines) < 2:
        logger.debug("Unexpected probe output from %s: %r", command, result.stdout)
        return None

    return PythonEnvironment(executable=Path(lines[0].strip()), prefix=Path(lines[1].strip()))


def _virtualenv_python(venv: Path) -> Path:
    if sys.platform == "win32":
        return venv / "Scripts" / "python.exe"
    return venv / "bin" / "python"


def locate_environment(python: str | None = None) -> PythonEnvironment:
    """Find the active Python environment.

    Resolution order:
    1. Explicit interpreter override
    2. The interpreter of ``$VIRTUAL_ENV``
    3. The first working of ``python3``, ``python`` and ``py`` on PATH

    Args:
        python: Interpreter override from the CLI or settings.

    Returns:
        The located PythonEnvironment.

    Raises:
        EnvironmentNotFoundError: If no candidate interpreter works. An
            explicit override that fails is an error rather than a fallback.
    """
    if python:
        environment = probe_interpreter(python)
        if environment is None:
            msg = f"Python interpreter not usable: {python}"
            raise EnvironmentNotFoundError(msg)
        return environment

    candidates: list[str] = []
    virtual_env = os.environ.get("VIRTUAL_ENV")
    if virtual_env:
        candidates.append(str(_virtualenv_python(Path(virtual_env))))
    candidates.extend(PYTHON_CANDIDATES)

    for candidate in candidates:
        environment = probe_interpreter(candidate)
        if environment is not None:
            logger.debug("Using Python %s (prefix %s)", environment.executable, environment.prefix)
            return environment

    msg = f"No Python interpreter found (tried: {', '.join(candidates)})"
    raise EnvironmentNotFoundError(msg)
