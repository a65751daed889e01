"""Install batch orchestration.

The Orchestrator runs one installer call per package, either one at a
time or across a bounded thread pool, feeds a ProgressReporter, and records
the successful installs in the manifest once every task has finished.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from datetime import UTC, datetime

from pipctl.core.manifest import ManifestError, ManifestStore
from pipctl.core.progress import ProgressReporter
from pipctl.installers.base import UNKNOWN_VERSION, Installer
from pipctl.models.manifest import ManifestEntry
from pipctl.models.specifier import PackageSpecifier
from pipctl.models.task import ExecutionMode, InstallResult, InstallTask, TaskStatus

logger = logging.getLogger(__name__)

# Seconds between progress redraws while workers are busy
RENDER_INTERVAL = 0.1


class ManifestPersistError(ManifestError):
    """Raised when a batch finished but its manifest update could not be saved.

    Attributes:
        results: Outcome of every task in the batch, in submission order.
    """

    def __init__(self, message: str, results: list[InstallResult]) -> None:
        super().__init__(message)
        self.results = results


class Orchestrator:
    """Installs batches of packages and records the successes.

    Each call to :meth:`run` is an independent batch with its own task list,
    worker pool and progress reporter.
    """

    def __init__(
        self,
        installer: Installer,
        store: ManifestStore,
        *,
        reporter_factory: Callable[[], ProgressReporter] | None = None,
        render_interval: float = RENDER_INTERVAL,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            installer: Installer used for every package.
            store: Manifest to update with successful installs.
            reporter_factory: Builds a fresh reporter per batch. Defaults to a
                ProgressReporter on Rich's global console.
            render_interval: Seconds between progress redraws.
        """
        self._installer = installer
        self._store = store
        self._reporter_factory = reporter_factory or ProgressReporter
        self._render_interval = render_interval

    def run(
        self,
        specifiers: Sequence[PackageSpecifier],
        concurrency: int = 1,
        mode: ExecutionMode = ExecutionMode.SEQUENTIAL,
        reporter: ProgressReporter | None = None,
    ) -> list[InstallResult]:
        """Install a batch of packages.

        A failing package never stops, cancels or blocks the others. Once
        every task is terminal, the successful installs are written to the
        manifest in a single update; nothing is written if none succeeded.

        Args:
            specifiers: Packages to install, in submission order.
            concurrency: Worker count for parallel mode, clamped to
                ``1..len(specifiers)``. Ignored in sequential mode.
            mode: Sequential or parallel scheduling.
            reporter: Progress reporter for this batch. A new one is created
                if omitted; it must not have been attached before.

        Returns:
            One InstallResult per specifier, in submission order.

        Raises:
            ManifestPersistError: If the manifest could not be saved. The
                exception carries the full result list.
        """
        if not specifiers:
            logger.debug("Empty batch, nothing to install")
            return []

        tasks = [InstallTask(index=i, specifier=spec) for i, spec in enumerate(specifiers)]
        if mode is ExecutionMode.SEQUENTIAL:
            workers = 1
        else:
            workers = max(1, min(concurrency, len(tasks)))

        logger.info(
            "Installing %d package(s) (mode=%s, workers=%d)",
            len(tasks),
            mode.value,
            workers,
        )

        if reporter is None:
            reporter = self._reporter_factory()
        reporter.attach(tasks)

        with reporter:
            if workers == 1:
                results = self._run_sequential(tasks, reporter)
            else:
                results = self._run_parallel(tasks, workers, reporter)
            final = reporter.render()

        logger.info("Batch finished: %d succeeded, %d failed", final.succeeded, final.failed)

        results.sort(key=lambda r: r.index)
        self._record_successes(results)
        return results

    def _run_sequential(
        self,
        tasks: list[InstallTask],
        reporter: ProgressReporter,
    ) -> list[InstallResult]:
        results: list[InstallResult] = []
        for task in tasks:
            results.append(self._execute(task, reporter, on_running=reporter.render))
        return results

    def _run_parallel(
        self,
        tasks: list[InstallTask],
        workers: int,
        reporter: ProgressReporter,
    ) -> list[InstallResult]:
        results: list[InstallResult] = []
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pipctl-install")
        try:
            pending: set[Future[InstallResult]] = {
                executor.submit(self._execute, task, reporter) for task in tasks
            }
            # The calling thread is the only renderer.
            while pending:
                done, pending = wait(
                    pending, timeout=self._render_interval, return_when=FIRST_COMPLETED
                )
                results.extend(future.result() for future in done)
                reporter.render()
        except BaseException:
            # Stop dispatching queued tasks; in-flight installs run to completion.
            executor.shutdown(wait=True, cancel_futures=True)
            raise
        executor.shutdown(wait=True)
        return results

    def _execute(
        self,
        task: InstallTask,
        reporter: ProgressReporter,
        on_running: Callable[[], object] | None = None,
    ) -> InstallResult:
        """Run one task to a terminal state. Never raises installer errors.

        ``on_running`` is called once the task is RUNNING, before the
        installer starts. Worker threads never pass it.
        """
        self._transition(task, TaskStatus.RUNNING, reporter)
        if on_running is not None:
            on_running()
        spec = task.specifier

        try:
            outcome = self._installer.install(spec)
        except Exception as e:
            logger.warning("Installer error for %s: %s", spec, e)
            task.reason = str(e) or type(e).__name__
            self._transition(task, TaskStatus.FAILED, reporter)
            return InstallResult(index=task.index, specifier=spec, success=False, error=task.reason)

        if outcome.failed:
            task.reason = outcome.diagnostic
            logger.warning("Failed to install %s: %s", spec, outcome.diagnostic.splitlines()[0])
            self._transition(task, TaskStatus.FAILED, reporter)
            return InstallResult(index=task.index, specifier=spec, success=False, error=task.reason)

        version = outcome.version or spec.version or UNKNOWN_VERSION
        self._transition(task, TaskStatus.SUCCEEDED, reporter)
        return InstallResult(
            index=task.index,
            specifier=spec,
            success=True,
            version=version,
            message=f"Installed {spec.name} {version}",
        )

    @staticmethod
    def _transition(task: InstallTask, new: TaskStatus, reporter: ProgressReporter) -> None:
        old = task.status
        task.status = new
        reporter.on_transition(task.index, old, new)

    def _record_successes(self, results: list[InstallResult]) -> None:
        """Upsert successful installs and persist them in one write."""
        if self._installer.dry_run:
            logger.info("Dry-run: manifest not updated")
            return

        now = datetime.now(UTC)
        entries = [
            ManifestEntry(
                name=r.specifier.name,
                version=r.version or UNKNOWN_VERSION,
                updated=now,
            )
            for r in results
            if r.success
        ]
        if not entries:
            logger.debug("No successful installs, manifest left untouched")
            return

        try:
            self._store.upsert(entries)
            self._store.save()
        except ManifestError as e:
            raise ManifestPersistError(str(e), results) from e
