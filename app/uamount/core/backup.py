"""fstab backups.

Copies the mount table to ``{table}_BAK{N}`` before every mutation,
using the lowest unused N starting at 1. Backups are never overwritten
or pruned.
"""

import logging
import shutil
from pathlib import Path

from uamount.core.errors import StoreIOError

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = "_BAK"


def next_backup_path(table_path: Path) -> Path:
    """Return the first unused backup path for a table.

    Args:
        table_path: The mount table being backed up.

    Returns:
        ``{table_path}_BAK{N}`` for the lowest N >= 1 that does not exist.
    """
    index = 1
    while True:
        candidate = table_path.with_name(f"{table_path.name}{BACKUP_SUFFIX}{index}")
        if not candidate.exists():
            return candidate
        index += 1


class BackupManager:
    """Snapshots the mount table before it is changed.

    Attributes:
        _enabled: If False, snapshot() does nothing.
    """

    def __init__(self, enabled: bool = True) -> None:
        """Initialize the BackupManager.

        Args:
            enabled: Whether snapshots are taken.
        """
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        """Check if backups are taken."""
        return self._enabled

    def snapshot(self, table_path: Path) -> Path | None:
        """Copy the table to a new numbered backup.

        Args:
            table_path: The mount table to copy.

        Returns:
            Path of the backup, or None when backups are disabled.

        Raises:
            StoreIOError: If the copy fails. No mutation may follow.
        """
        if not self._enabled:
            logger.info("Backup of %s skipped", table_path)
            return None

        backup_path = next_backup_path(table_path)
        try:
            shutil.copy2(str(table_path), str(backup_path))
        except OSError as e:
            msg = f'Failed to back up "{table_path}" to "{backup_path}": {e}'
            raise StoreIOError(msg) from e

        logger.info('"%s" backed up as "%s"', table_path, backup_path)
        return backup_path
