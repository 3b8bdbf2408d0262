"""Device identity resolution.

Maps a block device path to the UUID of the filesystem it carries, which
stays stable while kernel device names (sda, sdb, ...) change between
plug-ins.
"""

import logging
import os
import stat
import subprocess

from uamount.core.errors import DeviceUnresolvableError
from uamount.utils.shell import run_command

logger = logging.getLogger(__name__)

# Timeout for blkid probing
_BLKID_TIMEOUT: float = 30.0


def is_block_device(device: str) -> bool:
    """Check if a path names an existing block device.

    Args:
        device: Path to check, e.g. /dev/sda1.

    Returns:
        True if the path exists and is a block device.
    """
    try:
        return stat.S_ISBLK(os.stat(device).st_mode)
    except OSError:
        return False


def resolve(device: str) -> str:
    """Resolve a block device to its filesystem UUID.

    Args:
        device: Block device path, must start with /dev/.

    Returns:
        The filesystem UUID reported by blkid.

    Raises:
        DeviceUnresolvableError: If the path is not a block device, blkid
            cannot be run, or the device carries no filesystem UUID.
    """
    if not device.startswith("/dev/") or not is_block_device(device):
        msg = f"No such block device: {device}"
        raise DeviceUnresolvableError(msg)

    try:
        result = run_command(
            ["blkid", "-o", "value", "-s", "UUID", device],
            timeout=_BLKID_TIMEOUT,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        msg = f"Unable to query UUID of device {device}: {e}"
        raise DeviceUnresolvableError(msg) from e

    uuid = result.stdout.strip()
    if not result.success or not uuid:
        msg = f'Unable to get UUID of device "{device}"'
        raise DeviceUnresolvableError(msg)

    logger.info("Device %s has UUID %s", device, uuid)
    return uuid
