"""Install task models.

This module defines the per-package state tracked during one install
batch, the terminal result of each task, and progress snapshots.
"""

from dataclasses import dataclass
from enum import Enum

from pipctl.models.specifier import PackageSpecifier


class TaskStatus(Enum):
    """Lifecycle state of an install task.

    Attributes:
        PENDING: Queued, not yet picked up by a worker.
        RUNNING: A worker is invoking the installer for this task.
        SUCCEEDED: The installer reported success.
        FAILED: The installer failed or could not be invoked.
    """

    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Check if the status can no longer change."""
        return self in (TaskStatus.SUCCEEDED, TaskStatus.FAILED)


# Legal status edges; anything else is rejected by the progress reporter.
TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.PENDING: frozenset({TaskStatus.RUNNING}),
    TaskStatus.RUNNING: frozenset({TaskStatus.SUCCEEDED, TaskStatus.FAILED}),
    TaskStatus.SUCCEEDED: frozenset(),
    TaskStatus.FAILED: frozenset(),
}


class ExecutionMode(str, Enum):
    """How an install batch schedules its tasks."""

    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"


@dataclass(slots=True)
class InstallTask:
    """A specifier scheduled for installation within one batch.

    Attributes:
        index: Submission position, unique within the batch.
        specifier: The package to install.
        status: Current lifecycle state.
        reason: Failure explanation once the task has FAILED.
    """

    index: int
    specifier: PackageSpecifier
    status: TaskStatus = TaskStatus.PENDING
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class InstallResult:
    """Terminal outcome of an install task.

    Attributes:
        index: Submission position of the originating task.
        specifier: The package that was installed.
        success: Whether the installation completed successfully.
        version: Version recorded for the package on success.
        message: Optional success message or additional information.
        error: Diagnostic text if the installation failed.
    """

    index: int
    specifier: PackageSpecifier
    success: bool
    version: str | None = None
    message: str | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the installation failed."""
        return not self.success


@dataclass(frozen=True, slots=True)
class ProgressSnapshot:
    """Point-in-time counts of task states within a batch."""

    total: int = 0
    pending: int = 0
    running: int = 0
    succeeded: int = 0
    failed: int = 0

    @property
    def completed(self) -> int:
        """Number of tasks in a terminal state."""
        return self.succeeded + self.failed

    @property
    def is_finished(self) -> bool:
        """Check if every task reached a terminal state."""
        return self.completed == self.total
