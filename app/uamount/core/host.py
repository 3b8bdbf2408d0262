"""Host side effects around the two stores.

Mount point directories, unmounting and the udev rule reload. None of
these touch fstab or the rule store; they are kept here so the
reconciler can be exercised without root.
"""

import logging
import os
import re
import subprocess
from pathlib import Path

from uamount.core.errors import StoreIOError
from uamount.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

# Permissions for mount points created by uamount
MOUNT_DIR_MODE = 0o775

# Timeout for sync/umount/udevadm (2 minutes, sync may flush a slow stick)
_COMMAND_TIMEOUT: float = 120.0

# lsblk -r escapes unsafe characters as \xHH
_LSBLK_ESCAPE = re.compile(r"\\x([0-9a-fA-F]{2})")


def _unescape_lsblk(value: str) -> str:
    return _LSBLK_ESCAPE.sub(lambda m: chr(int(m.group(1), 16)), value)


class HostOperations:
    """Directory, mount and udev operations on the running system.

    Attributes:
        _test_mode: If True, never unmount devices.
    """

    def __init__(self, test_mode: bool = False) -> None:
        """Initialize host operations.

        Args:
            test_mode: Skip unmounting, so test runs never touch real mounts.
        """
        self._test_mode = test_mode

    # === Mount point directories ===

    def is_empty_dir(self, path: Path) -> bool:
        """Check if a directory has no entries.

        Raises:
            StoreIOError: If the directory cannot be listed.
        """
        try:
            with os.scandir(path) as entries:
                return next(entries, None) is None
        except OSError as e:
            raise StoreIOError(f'Cannot read directory "{path}": {e}') from e

    def make_mount_dir(self, path: Path, uid: int | None = None, gid: int | None = None) -> None:
        """Create a mount point owned by the invoking user.

        Args:
            path: Directory to create. The parent must exist.
            uid: Owner uid, unchanged if None.
            gid: Owner gid, unchanged if None.

        Raises:
            StoreIOError: If the directory cannot be created.
        """
        try:
            path.mkdir()
            os.chmod(path, MOUNT_DIR_MODE)
            if uid is not None or gid is not None:
                os.chown(path, -1 if uid is None else uid, -1 if gid is None else gid)
        except OSError as e:
            raise StoreIOError(f'Unable to create the mount point "{path}": {e}') from e
        logger.info("Created mount point %s", path)

    def remove_dir(self, path: Path) -> bool:
        """Remove an empty directory.

        Args:
            path: Directory to remove.

        Returns:
            True if the directory was removed.
        """
        try:
            path.rmdir()
        except OSError as e:
            logger.warning("Unable to remove %s: %s", path, e)
            return False
        logger.info("Removed directory %s", path)
        return True

    # === Mounts ===

    def is_mounted_at(self, device: str, path: Path) -> bool:
        """Check if a device is currently mounted on a path.

        Args:
            device: Block device path.
            path: Expected mount point.

        Returns:
            True if lsblk reports the device mounted on the path.
        """
        try:
            result = run_command(["lsblk", "-rno", "MOUNTPOINT", device])
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            logger.warning("Could not query mount status of %s: %s", device, e)
            return False
        if not result.success:
            return False
        mount_points = {_unescape_lsblk(line.strip()) for line in result.stdout.splitlines()}
        return str(path) in mount_points

    def unmount(self, device: str) -> bool:
        """Flush buffers and unmount a device.

        Does nothing in test mode.

        Args:
            device: Block device path.

        Returns:
            True if the device was unmounted (or test mode is on).
        """
        if self._test_mode:
            logger.info("Test mode: not unmounting %s", device)
            return True

        try:
            run_command(["sync"], timeout=_COMMAND_TIMEOUT)
            result = run_command(["umount", device], timeout=_COMMAND_TIMEOUT)
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            logger.warning("Failed to unmount %s: %s", device, e)
            return False
        if not result.success:
            logger.warning("Failed to unmount %s: %s", device, result.stderr.strip())
            return False
        logger.info("Unmounted %s", device)
        return True

    def unmount_if_mounted(self, device: str, path: Path) -> bool:
        """Unmount a device if it is mounted on the given path.

        Returns:
            False only if an unmount was needed and failed.
        """
        if self._test_mode or not self.is_mounted_at(device, path):
            return True
        return self.unmount(device)

    # === udev ===

    def reload_rules(self) -> bool:
        """Ask udev to re-read its rule files.

        Returns:
            True if udevadm reported success.
        """
        if not command_exists("udevadm"):
            logger.warning("udevadm not found, udev rules not reloaded")
            return False
        try:
            result = run_command(["udevadm", "control", "--reload-rules"], timeout=_COMMAND_TIMEOUT)
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            logger.warning("Failed to reload udev rules: %s", e)
            return False
        if not result.success:
            logger.warning("Failed to reload udev rules: %s", result.stderr.strip())
            return False
        logger.info("Reloaded udev rules")
        return True
