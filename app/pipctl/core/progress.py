"""Live progress reporting for install batches.

The ProgressReporter aggregates task state transitions coming from many
worker threads and renders them as a Rich progress bar. Transitions and
rendering are decoupled: workers only record state changes, while a single
render loop decides when to redraw.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from types import TracebackType

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from pipctl.models.task import TRANSITIONS, InstallTask, ProgressSnapshot, TaskStatus

logger = logging.getLogger(__name__)

# Running package names shown in the bar description before truncating
_MAX_SHOWN_RUNNING = 3


class InvalidTransitionError(ValueError):
    """Raised when a task reports a state change it cannot make."""


class ProgressReporter:
    """Thread-safe aggregate of task states within one install batch.

    A reporter belongs to exactly one batch: :meth:`attach` may only be
    called once. All methods may be called from any thread.

    Example:
        >>> with ProgressReporter() as reporter:
        ...     reporter.attach(tasks)
        ...     reporter.on_transition(0, TaskStatus.PENDING, TaskStatus.RUNNING)
        ...     reporter.render()
    """

    def __init__(
        self,
        console: Console | None = None,
        *,
        disable: bool = False,
        transient: bool = True,
    ) -> None:
        """Initialize the reporter.

        Args:
            console: Console to draw on. Defaults to Rich's global console.
            disable: If True, track state without drawing anything.
            transient: If True, clear the bar when the batch ends.
        """
        self._lock = threading.Lock()
        self._statuses: list[TaskStatus] = []
        self._names: list[str] = []
        self._counts: dict[TaskStatus, int] = dict.fromkeys(TaskStatus, 0)
        self._attached = False
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=console,
            auto_refresh=False,
            transient=transient,
            disable=disable,
        )
        self._bar: TaskID | None = None

    def __enter__(self) -> ProgressReporter:
        self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._progress.stop()

    def attach(self, tasks: Sequence[InstallTask]) -> None:
        """Start tracking a batch of tasks.

        Args:
            tasks: Tasks indexed 0..n-1 in submission order.

        Raises:
            RuntimeError: If the reporter already tracks a batch.
            ValueError: If task indexes are not 0..n-1 in order.
        """
        if any(task.index != position for position, task in enumerate(tasks)):
            msg = "Task indexes must be 0..n-1 in submission order"
            raise ValueError(msg)

        with self._lock:
            if self._attached:
                msg = "Progress reporter is already attached to a batch"
                raise RuntimeError(msg)
            self._attached = True
            self._statuses = [task.status for task in tasks]
            self._names = [task.specifier.name for task in tasks]
            for status in self._statuses:
                self._counts[status] += 1

        self._bar = self._progress.add_task("Installing", total=len(tasks))

    def on_transition(self, index: int, old: TaskStatus, new: TaskStatus) -> None:
        """Record a task state change.

        Args:
            index: Submission index of the task.
            old: Status the caller believes the task is leaving.
            new: Status the task is entering.

        Raises:
            InvalidTransitionError: If the index is unknown, ``old`` does not
                match the recorded status, or ``old -> new`` is not allowed.
        """
        with self._lock:
            if not 0 <= index < len(self._statuses):
                msg = f"Unknown task index {index}"
                raise InvalidTransitionError(msg)

            current = self._statuses[index]
            if current is not old:
                msg = f"Task {index} is {current.value}, not {old.value}"
                raise InvalidTransitionError(msg)
            if new not in TRANSITIONS[old]:
                msg = f"Task {index} cannot go from {old.value} to {new.value}"
                raise InvalidTransitionError(msg)

            self._statuses[index] = new
            self._counts[old] -= 1
            self._counts[new] += 1

        logger.debug("Task %d (%s): %s -> %s", index, self._names[index], old.value, new.value)

    def snapshot(self) -> ProgressSnapshot:
        """Read the current counts without drawing."""
        with self._lock:
            return self._snapshot_locked()

    def render(self) -> ProgressSnapshot:
        """Redraw the progress bar from the current state.

        Returns:
            The snapshot that was drawn.
        """
        with self._lock:
            snapshot = self._snapshot_locked()
            running = [
                name
                for name, status in zip(self._names, self._statuses, strict=True)
                if status is TaskStatus.RUNNING
            ]

        if self._bar is not None:
            self._progress.update(
                self._bar,
                completed=snapshot.completed,
                description=_describe(snapshot, running),
            )
            self._progress.refresh()
        return snapshot

    def _snapshot_locked(self) -> ProgressSnapshot:
        return ProgressSnapshot(
            total=len(self._statuses),
            pending=self._counts[TaskStatus.PENDING],
            running=self._counts[TaskStatus.RUNNING],
            succeeded=self._counts[TaskStatus.SUCCEEDED],
            failed=self._counts[TaskStatus.FAILED],
        )


def _describe(snapshot: ProgressSnapshot, running: list[str]) -> str:
    """Build the progress bar description."""
    if snapshot.is_finished:
        text = "Done"
    elif running:
        shown = ", ".join(running[:_MAX_SHOWN_RUNNING])
        extra = len(running) - _MAX_SHOWN_RUNNING
        text = f"Installing {shown}" + (f" (+{extra})" if extra > 0 else "")
    else:
        text = "Waiting"

    if snapshot.failed:
        text += f" [error]{snapshot.failed} failed[/]"
    return text
