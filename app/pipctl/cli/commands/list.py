"""List command implementation.

Shows the packages recorded in the manifest, ordered by name.
"""

import json
from typing import Annotated

import typer

from pipctl.cli.session import open_session
from pipctl.utils.formatting import console, create_package_table, print_info


def list_packages(
    ctx: typer.Context,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """List packages tracked in the manifest.

    Examples:
        pipctl list
        pipctl list --json     # JSON output for scripting
    """
    session = open_session(ctx)
    entries = session.store.list()

    if json_output:
        data = [
            {"name": e.name, "version": e.version, "updated": e.updated.isoformat()}
            for e in entries
        ]
        console.print_json(json.dumps(data))
        return

    if not entries:
        print_info("No packages installed.")
        return

    table = create_package_table(f"Managed Packages ({len(entries)} total)")
    for entry in entries:
        table.add_row(entry.name, entry.version, entry.updated.strftime("%Y-%m-%d %H:%M"))
    console.print(table)
