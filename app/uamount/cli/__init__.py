"""CLI package for uamount.

This package contains the Typer application and all subcommands.
"""

from uamount.cli.main import app

__all__ = ["app"]
