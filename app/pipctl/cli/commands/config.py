"""Settings commands.

Shows the effective pipctl settings and writes a settings file with the
defaults.
"""

from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from pipctl.cli.session import require_settings
from pipctl.core.config import ConfigError, Settings, save_settings
from pipctl.core.paths import ensure_config_dir, get_config_path
from pipctl.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or initialize pipctl settings.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show the effective settings."""
    settings = require_settings()
    path = get_config_path()

    table = Table(
        title="Settings",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Key", no_wrap=True)
    table.add_column("Value")

    for key, value in settings.model_dump().items():
        shown = "-" if value is None else str(value)
        table.add_row(key, f"[info]{escape(shown)}[/info]")

    console.print(table)
    if not path.exists():
        print_info(f"No settings file at {path}; showing defaults.")
    else:
        console.print(f"[muted]Loaded from {escape(str(path))}[/muted]")


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing settings file."),
    ] = False,
) -> None:
    """Write a settings file containing the defaults."""
    path = get_config_path()
    if path.exists() and not force:
        print_error(f"Settings file already exists: {path}")
        print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1)

    try:
        ensure_config_dir()
        saved = save_settings(Settings(), path)
    except (ConfigError, RuntimeError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Wrote default settings to {saved}")
