"""Subprocess helpers.

pip and interpreter probes run as child processes with captured, decoded
output. Only the tail of that output is kept for diagnostics.
"""

import subprocess
from dataclasses import dataclass

# Number of trailing output lines kept for diagnostics
TAIL_LINES = 20


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured outcome of a finished child process.

    Attributes:
        stdout: Decoded standard output.
        stderr: Decoded standard error.
        returncode: Process exit status.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if the process exited with status 0."""
        return self.returncode == 0


def run_command(args: list[str], *, timeout: float | None = 60.0) -> CommandResult:
    """Run a child process to completion and capture its output.

    Args:
        args: Executable followed by its arguments. No shell is involved.
        timeout: Seconds before the child is killed; None waits indefinitely.

    Returns:
        CommandResult; a non-zero exit is not an exception.

    Raises:
        subprocess.TimeoutExpired: If the child outlives ``timeout``.
        FileNotFoundError: If the executable does not exist.
        PermissionError: If the executable cannot be run.
    """
    completed = subprocess.run(args, capture_output=True, text=True, timeout=timeout)
    return CommandResult(completed.stdout, completed.stderr, completed.returncode)


def tail(text: str, lines: int = TAIL_LINES) -> str:
    """Return the last non-empty lines of command output."""
    kept = [line for line in text.strip().splitlines() if line.strip()]
    return "\n".join(kept[-lines:])
