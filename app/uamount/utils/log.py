"""Logging setup for the uamount CLI.

Routes all module loggers through a single Rich handler on stderr so
log records and user-facing messages share the same console.
"""

import logging

from rich.logging import RichHandler

from uamount.utils.formatting import err_console


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure the root logger.

    Args:
        verbose: Log progress (INFO) in addition to warnings.
        quiet: Only log errors. Takes precedence over verbose.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=err_console,
        show_time=False,
        show_path=verbose,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear any existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
