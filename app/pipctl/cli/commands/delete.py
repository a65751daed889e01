"""Delete command implementation.

Uninstalls one package and drops it from the manifest.
"""

from typing import Annotated

import typer

from pipctl.cli.session import open_session
from pipctl.core.manifest import ManifestError
from pipctl.installers.base import InstallerInvocationError
from pipctl.models.specifier import PackageSpecifier, SpecifierParseError
from pipctl.utils.formatting import (
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)


def delete(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Package to uninstall.")],
) -> None:
    """Uninstall a package and stop tracking it.

    Examples:
        pipctl delete requests
    """
    try:
        spec = PackageSpecifier(name=name.strip())
    except SpecifierParseError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    session = open_session(ctx)
    installer = session.installer()

    with err_console.status(f"Uninstalling {spec.name}..."):
        try:
            result = installer.uninstall(spec.name)
        except InstallerInvocationError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e

    if result.failed:
        print_error(f"Failed to uninstall {spec.name}: {result.diagnostic}")
        raise typer.Exit(code=1)

    if session.store.remove(spec.name) is None:
        print_info(f"{spec.name} was not tracked in the manifest.")
    try:
        session.store.save()
    except ManifestError as e:
        print_warning(f"{spec.name} was removed but the manifest could not be updated: {e}")
        raise typer.Exit(code=1) from e

    print_success(f"Removed package {spec.name}")
