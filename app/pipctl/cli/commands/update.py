"""Update command implementation.

Moves one package to an exact version and records it in the manifest.
"""

from typing import Annotated

import typer

from pipctl.cli.session import open_session
from pipctl.core.manifest import ManifestError
from pipctl.installers.base import InstallerInvocationError
from pipctl.models.manifest import ManifestEntry
from pipctl.models.specifier import PackageSpecifier, SpecifierParseError
from pipctl.utils.formatting import err_console, print_error, print_success, print_warning


def update(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Package to update.")],
    version: Annotated[str, typer.Argument(help="Exact version to install.")],
) -> None:
    """Update a package to a specific version.

    The manifest is only changed after pip reports success.

    Examples:
        pipctl update requests 2.32.3
    """
    try:
        spec = PackageSpecifier(name=name.strip(), version=version.strip())
    except SpecifierParseError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    session = open_session(ctx)
    installer = session.installer()
    previous = session.store.get(spec.name)

    with err_console.status(f"Updating {spec.name} to {spec.version}..."):
        try:
            result = installer.update(spec.name, spec.version or "")
        except InstallerInvocationError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e

    if result.failed:
        print_error(f"Failed to update {spec.name}: {result.diagnostic}")
        raise typer.Exit(code=1)

    installed = result.version or spec.version or ""
    session.store.upsert([ManifestEntry(name=spec.name, version=installed)])
    try:
        session.store.save()
    except ManifestError as e:
        print_warning(f"{spec.name} was updated but could not be recorded: {e}")
        raise typer.Exit(code=1) from e

    if previous is not None and previous.version != installed:
        print_success(f"Updated {spec.name} {previous.version} -> {installed}")
    else:
        print_success(f"Updated {spec.name} to version {installed}")
