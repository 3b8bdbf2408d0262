"""CLI commands for uamount.

This package contains all subcommand implementations.
"""

from uamount.cli.commands import add, config, remove

__all__ = ["add", "config", "remove"]
