"""Install command implementation.

Installs packages given on the command line or in a requirements file,
one at a time or in parallel, and records the successes in the manifest.
"""

from pathlib import Path
from typing import Annotated

import typer

from pipctl.cli.display import (
    create_results_table,
    print_failure_details,
    print_line_errors,
    print_results_summary,
)
from pipctl.cli.session import open_session
from pipctl.core.orchestrator import ManifestPersistError, Orchestrator
from pipctl.core.progress import ProgressReporter
from pipctl.core.requirements import (
    RequirementLineError,
    RequirementsFileError,
    RequirementsParseError,
    read_requirements,
)
from pipctl.models.specifier import PackageSpecifier, SpecifierParseError
from pipctl.models.task import ExecutionMode, InstallResult
from pipctl.utils.formatting import console, print_error, print_info, print_warning


def _parse_arguments(packages: list[str]) -> list[PackageSpecifier]:
    """Parse command-line specifiers, reporting every bad one.

    Raises:
        typer.Exit: If any specifier is malformed.
    """
    specifiers: list[PackageSpecifier] = []
    errors: list[RequirementLineError] = []
    for position, text in enumerate(packages, start=1):
        try:
            specifiers.append(PackageSpecifier.parse(text))
        except SpecifierParseError as e:
            errors.append(RequirementLineError(position, text, e.reason))

    if errors:
        for error in errors:
            print_error(f"Invalid package specifier {error.content!r}: {error.reason}")
        raise typer.Exit(code=1)
    return specifiers


def _load_requirements(requirement: str) -> list[PackageSpecifier]:
    """Read a requirements file given as ``-r=<path>`` or ``-r <path>``.

    Raises:
        typer.Exit: If the file is missing, unreadable or malformed.
    """
    # Click hands "-r=path" over as "=path".
    path = Path(requirement.removeprefix("=")).expanduser()
    try:
        return read_requirements(path)
    except RequirementsFileError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except RequirementsParseError as e:
        print_line_errors(e.source, e.errors)
        raise typer.Exit(code=1) from e


def install(
    ctx: typer.Context,
    packages: Annotated[
        list[str] | None,
        typer.Argument(
            help="Packages to install, as NAME or NAME==VERSION.",
            show_default=False,
        ),
    ] = None,
    requirement: Annotated[
        str | None,
        typer.Option(
            "--requirement",
            "-r",
            help="Install from the given requirements file.",
            metavar="PATH",
        ),
    ] = None,
    parallel: Annotated[
        bool,
        typer.Option(
            "--parallel",
            "-p",
            help="Install packages concurrently.",
        ),
    ] = False,
    jobs: Annotated[
        int | None,
        typer.Option(
            "--jobs",
            "-j",
            min=1,
            help="Number of concurrent installs (implies --parallel).",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Resolve packages without installing them.",
        ),
    ] = False,
) -> None:
    """Install Python packages into the active environment.

    Each package is installed by its own pip invocation, so one failing
    package never stops the others. Successfully installed packages are
    recorded in the manifest with their versions.

    Examples:
        pipctl install requests
        pipctl install numpy==2.1.0 pandas
        pipctl install -r=requirements.txt
        pipctl install -p -r=requirements.txt
        pipctl install --jobs 8 -r requirements.txt
    """
    specifiers: list[PackageSpecifier] = []
    if requirement is not None:
        specifiers.extend(_load_requirements(requirement))
        if not specifiers:
            print_info("No packages found in requirements file.")
    if packages:
        specifiers.extend(_parse_arguments(packages))

    if not specifiers:
        if requirement is None:
            print_error("Nothing to install. Give package names or -r=<file>.")
            raise typer.Exit(code=1)
        return

    session = open_session(ctx)
    installer = session.installer(dry_run=dry_run)

    mode = ExecutionMode.PARALLEL if parallel or jobs is not None else ExecutionMode.SEQUENTIAL
    concurrency = jobs or session.settings.parallel_jobs

    orchestrator = Orchestrator(
        installer,
        session.store,
        reporter_factory=lambda: ProgressReporter(console=console, disable=session.quiet),
    )

    persist_error: ManifestPersistError | None = None
    try:
        results: list[InstallResult] = orchestrator.run(specifiers, concurrency, mode)
    except ManifestPersistError as e:
        persist_error = e
        results = e.results

    console.print(create_results_table(results, dry_run=dry_run))
    print_failure_details(results)
    print_results_summary(results)

    if dry_run:
        print_info("\nDry-run mode: No changes were made.")

    if persist_error is not None:
        print_warning(
            f"Installed packages could not be recorded: {persist_error}. "
            f"The manifest at {session.store.path} is now out of date."
        )
        raise typer.Exit(code=1)

    if any(r.failed for r in results):
        raise typer.Exit(code=1)
