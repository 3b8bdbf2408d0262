"""Config commands for persistent defaults.

Shows and initializes ~/.config/uamount/config.toml.
"""

from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from uamount.core.config import ConfigError, UamountConfig, load_config, save_config
from uamount.core.paths import get_config_path
from uamount.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or initialize persistent defaults.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show the effective defaults."""
    config_path = get_config_path()
    try:
        config = load_config(config_path)
    except ConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    table = Table(
        title="uamount defaults",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Setting", no_wrap=True)
    table.add_column("Value")

    for name, value in config.model_dump().items():
        table.add_row(name, escape(str(value)))

    console.print(table)
    source = config_path if config_path.exists() else "built-in defaults"
    console.print(f"\n[dim]Source: {escape(str(source))}[/dim]")


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with the default settings."""
    config_path = get_config_path()
    if config_path.exists() and not force:
        print_error(escape(f"Config already exists: {config_path}"))
        print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1)

    try:
        saved = save_config(UamountConfig(), config_path)
    except ConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    print_success(escape(f"Config written to {saved}"))
