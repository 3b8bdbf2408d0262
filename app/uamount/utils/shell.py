"""Subprocess helpers for the system tools uamount drives.

blkid, lsblk, sync, umount and udevadm are all run through
:func:`run_command`, which captures their output instead of letting it
reach the terminal.
"""

import logging
import shlex
import shutil
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured outcome of an external command.

    Attributes:
        stdout: Standard output.
        stderr: Standard error.
        returncode: Exit status.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if the command exited with status 0."""
        return self.returncode == 0


def run_command(
    args: list[str],
    *,
    check: bool = False,
    timeout: float | None = 60.0,
) -> CommandResult:
    """Run a command and capture its output.

    Args:
        args: Command and arguments, never passed through a shell.
        check: If True, raise CalledProcessError on non-zero exit.
        timeout: Seconds to wait before giving up.

    Returns:
        CommandResult with stdout, stderr and returncode.

    Raises:
        subprocess.CalledProcessError: If check=True and the command fails.
        subprocess.TimeoutExpired: If the command exceeds the timeout.
        FileNotFoundError: If the executable is not installed.
    """
    logger.debug("Running %s", shlex.join(args))
    completed = subprocess.run(
        args,
        capture_output=True,
        text=True,
        check=check,
        timeout=timeout,
    )
    if completed.returncode != 0:
        logger.debug("%s exited with %d", args[0], completed.returncode)
    return CommandResult(
        stdout=completed.stdout,
        stderr=completed.stderr,
        returncode=completed.returncode,
    )


def command_exists(name: str) -> bool:
    """Check if an executable is on PATH."""
    return shutil.which(name) is not None
