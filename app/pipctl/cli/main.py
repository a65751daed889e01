"""Main CLI application entry point.

Defines the Typer application, global options and logging setup.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from pipctl import __version__
from pipctl.cli.commands import config, delete, install, update
from pipctl.cli.commands import list as list_command
from pipctl.utils.formatting import err_console

app = typer.Typer(
    name="pipctl",
    help="Install and track Python packages in the active environment.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Eager --version handler."""
    if value:
        typer.echo(f"pipctl version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route log records to stderr through Rich.

    Args:
        verbose: If True, log at DEBUG level; otherwise only warnings.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose, rich_tracebacks=True)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Print the pipctl version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Log debug details to stderr.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Hide the live progress bar.",
        ),
    ] = False,
    python: Annotated[
        Path | None,
        typer.Option(
            "--python",
            help="Python interpreter whose environment is managed.",
            envvar="PIPCTL_PYTHON",
        ),
    ] = None,
    manifest: Annotated[
        Path | None,
        typer.Option(
            "--manifest",
            help="Manifest file to use instead of the environment's.",
            envvar="PIPCTL_MANIFEST",
        ),
    ] = None,
) -> None:
    """pipctl - install and track Python packages.

    Packages are installed with pip into the active environment, one pip
    process per package, optionally in parallel. Installed versions are
    recorded in a manifest kept inside the environment.
    """
    configure_logging(verbose)

    # Commands read these through pipctl.cli.session
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["python"] = python
    ctx.obj["manifest"] = manifest


# Commands
app.command(name="install")(install.install)
app.command(name="update")(update.update)
app.command(name="delete")(delete.delete)
app.command(name="list")(list_command.list_packages)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
