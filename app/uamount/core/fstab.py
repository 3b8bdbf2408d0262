"""Mount table store.

Reads, searches, appends to and rewrites the fstab file. Only whole
lines keyed by ``UUID=<identity>`` are ever added or deleted; every other
line is preserved byte for byte.
"""

import logging
import os
from pathlib import Path
from tempfile import NamedTemporaryFile

from uamount.core.errors import MalformedEntryError, StoreIOError
from uamount.models.mount import MountRecord, identity_key, line_key

logger = logging.getLogger(__name__)


class MountTableStore:
    """Line-oriented access to an fstab file.

    Attributes:
        path: The fstab file managed by this store.
    """

    def __init__(self, path: Path) -> None:
        """Initialize the store.

        Args:
            path: Path to the fstab file (usually /etc/fstab).
        """
        self._path = path

    @property
    def path(self) -> Path:
        """Path to the fstab file."""
        return self._path

    def read(self) -> str:
        """Read the whole mount table.

        Returns:
            The file contents.

        Raises:
            StoreIOError: If the file cannot be read.
        """
        try:
            return self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StoreIOError(f'Failed to read "{self._path}": {e}') from e

    def entries_for(self, identity: str) -> list[str]:
        """Return every line keyed by a device identity, parseable or not.

        The first field must equal ``UUID=<identity>`` exactly, so an
        identity that is a prefix of another never matches it.

        Raises:
            StoreIOError: If the file cannot be read.
        """
        key = identity_key(identity)
        return [line for line in self.read().splitlines() if line_key(line) == key]

    def find_by_identity(self, identity: str) -> MountRecord | None:
        """Find the record for a device identity.

        Args:
            identity: Filesystem UUID to look up.

        Returns:
            The record of the first line keyed by the identity, or None if
            the table has no such line.

        Raises:
            MalformedEntryError: If that line is not a valid fstab entry.
            StoreIOError: If the file cannot be read.
        """
        entries = self.entries_for(identity)
        if not entries:
            return None
        record = MountRecord.parse(entries[0])
        if record is None:
            raise MalformedEntryError(
                f'Malformed entry for "{identity}" in "{self._path}": {entries[0].strip()}'
            )
        return record

    @staticmethod
    def extract_mount_path(record: MountRecord) -> Path:
        """Return the mount destination of a record."""
        return record.mount_path

    def append(self, record: MountRecord) -> None:
        """Append a record as a new line.

        A missing trailing newline on the last existing line is added
        first, so exactly one line is appended.

        Args:
            record: Record to append.

        Raises:
            StoreIOError: If the file cannot be read or written.
        """
        contents = self.read()
        prefix = "" if not contents or contents.endswith("\n") else "\n"
        try:
            with self._path.open(mode="a", encoding="utf-8") as f:
                f.write(f"{prefix}{record.to_line()}\n")
                f.flush()
        except OSError as e:
            raise StoreIOError(f'Failed to write "{self._path}": {e}') from e
        logger.info("Appended %s to %s", record.key, self._path)

    def remove_by_identity(self, identity: str) -> tuple[str, bool]:
        """Compute the table contents without the identity's lines.

        Nothing is written; pass the contents to :meth:`write`.

        Args:
            identity: Filesystem UUID whose entry is removed.

        Returns:
            Tuple of (new contents, removed). ``removed`` is False when the
            table holds no entry for the identity.

        Raises:
            StoreIOError: If the file cannot be read.
        """
        key = identity_key(identity)
        kept: list[str] = []
        removed = False
        for line in self.read().splitlines(keepends=True):
            if line_key(line) == key:
                removed = True
                continue
            kept.append(line)

        contents = "".join(kept)
        if contents and not contents.endswith("\n"):
            contents += "\n"
        return contents, removed

    def write(self, contents: str) -> None:
        """Replace the mount table atomically.

        Writes to a temporary file in the same directory, copies the
        original permissions and renames it over the table. A symlinked
        table keeps its link; the file it points to is replaced.

        Args:
            contents: New file contents.

        Raises:
            StoreIOError: If the file cannot be written.
        """
        tmp_path: Path | None = None
        try:
            target = self._path.resolve()
            mode = target.stat().st_mode & 0o7777 if target.exists() else 0o644
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=target.parent,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                f.write(contents)
            os.chmod(tmp_path, mode)
            # os.replace() is atomic on POSIX
            os.replace(str(tmp_path), str(target))
        except OSError as e:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise StoreIOError(f'Failed to write "{self._path}": {e}') from e
        logger.info("Rewrote %s", self._path)
