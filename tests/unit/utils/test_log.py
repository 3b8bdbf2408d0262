"""Unit tests for logging setup."""

import logging
from collections.abc import Iterator

import pytest
from rich.logging import RichHandler
from uamount.utils.log import setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    """Restore root logger handlers and level after each test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    """Tests for setup_logging."""

    @pytest.mark.parametrize(
        ("verbose", "quiet", "level"),
        [
            (False, False, logging.WARNING),
            (True, False, logging.INFO),
            (False, True, logging.ERROR),
            (True, True, logging.ERROR),
        ],
    )
    def test_levels(self, verbose: bool, quiet: bool, level: int) -> None:
        """Verbosity flags choose the root level; quiet wins."""
        setup_logging(verbose=verbose, quiet=quiet)

        assert logging.getLogger().level == level

    def test_single_rich_handler(self) -> None:
        """Repeated setup leaves exactly one Rich handler."""
        setup_logging()
        setup_logging(verbose=True)

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], RichHandler)
