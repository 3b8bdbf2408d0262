"""Mount table record model.

This module defines the typed representation of a single fstab line
managed by uamount, together with its parse and serialize functions.
"""

from dataclasses import dataclass
from pathlib import Path

# Key prefix of the first fstab field for UUID-addressed devices
UUID_PREFIX = "UUID="

DEFAULT_FS_TYPE = "auto"
DEFAULT_OPTIONS = "defaults,noauto"


def escape_field(value: str) -> str:
    """Escape whitespace and backslashes for an fstab field."""
    return (
        value.replace("\\", "\\134")
        .replace(" ", "\\040")
        .replace("\t", "\\011")
        .replace("\n", "\\012")
    )


def unescape_field(value: str) -> str:
    """Convert fstab octal escape sequences back to their real characters."""
    return (
        value.replace("\\040", " ")
        .replace("\\011", "\t")
        .replace("\\012", "\n")
        .replace("\\134", "\\")
    )


def identity_key(identity: str) -> str:
    """Return the first fstab field used for a device identity."""
    return f"{UUID_PREFIX}{identity}"


def build_options(uid: int | None = None, gid: int | None = None) -> str:
    """Build the mount options for an automounted device.

    Args:
        uid: Owner uid for filesystems without POSIX ownership.
        gid: Owner gid for filesystems without POSIX ownership.

    Returns:
        Comma separated mount options.
    """
    options = DEFAULT_OPTIONS
    if uid is not None:
        options += f",uid={uid}"
    if gid is not None:
        options += f",gid={gid}"
    return options


@dataclass(frozen=True, slots=True)
class MountRecord:
    """A UUID-addressed fstab entry.

    Attributes:
        identity: Filesystem UUID of the device.
        mount_path: Absolute directory the device is mounted on.
        fs_type: Filesystem type field.
        options: Comma separated mount options.
        dump: dump(8) flag.
        passno: fsck pass number.
    """

    identity: str
    mount_path: Path
    fs_type: str = DEFAULT_FS_TYPE
    options: str = DEFAULT_OPTIONS
    dump: int = 0
    passno: int = 0

    def __post_init__(self) -> None:
        """Validate record data after initialization."""
        if not self.identity:
            msg = "Device identity cannot be empty"
            raise ValueError(msg)
        if any(c.isspace() for c in self.identity):
            msg = f"Device identity cannot contain whitespace: {self.identity!r}"
            raise ValueError(msg)

    @property
    def key(self) -> str:
        """First fstab field of this record."""
        return identity_key(self.identity)

    def to_line(self) -> str:
        """Serialize the record as a single fstab line without newline."""
        return " ".join(
            (
                self.key,
                escape_field(str(self.mount_path)),
                self.fs_type,
                self.options,
                str(self.dump),
                str(self.passno),
            )
        )

    @classmethod
    def parse(cls, line: str) -> "MountRecord | None":
        """Parse an fstab line into a record.

        Blank lines, comments, lines with fewer than four fields and
        entries not addressed by UUID are not records.

        Args:
            line: A single fstab line.

        Returns:
            The parsed MountRecord, or None if the line is not a UUID entry.
        """
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            return None

        parts = stripped.split()
        if len(parts) < 4 or not parts[0].startswith(UUID_PREFIX):
            return None

        identity = parts[0][len(UUID_PREFIX) :]
        if not identity:
            return None

        try:
            dump = int(parts[4]) if len(parts) > 4 else 0
            passno = int(parts[5]) if len(parts) > 5 else 0
        except ValueError:
            return None

        return cls(
            identity=identity,
            mount_path=Path(unescape_field(parts[1])),
            fs_type=parts[2],
            options=parts[3],
            dump=dump,
            passno=passno,
        )


def line_key(line: str) -> str | None:
    """Return the first field of an fstab data line.

    Args:
        line: A single fstab line.

    Returns:
        The first whitespace-delimited field, or None for blank and comment lines.
    """
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return None
    return stripped.split()[0]
