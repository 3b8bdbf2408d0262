"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from uamount import __version__
from uamount.cli.commands import add, config, remove
from uamount.utils.log import setup_logging

# Create main Typer app
app = typer.Typer(
    name="uamount",
    help="Create and remove udev automounts for block devices.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "-?", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"uamount version {__version__}")
        raise typer.Exit()


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
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """uamount - udev automount for removable block devices.

    Keeps an fstab entry and a udev rule per device so the device is
    mounted at a fixed path when plugged in. Must be run as root.
    """
    setup_logging(verbose=verbose, quiet=quiet)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# Register commands
app.command(name="add")(add.add_automount)
app.command(name="remove")(remove.remove_automount)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
