"""Pending change and reconcile outcome models.

This module defines the in-memory description of the paired fstab and
udev rule mutation, and the result reported after a run.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from uamount.models.mount import MountRecord
from uamount.models.rule import RuleFile


class ChangeKind(str, Enum):
    """Direction of a reconcile run.

    Attributes:
        ADD: Append an fstab entry and create a udev rule.
        REMOVE: Delete the fstab entry and the udev rule.
    """

    ADD = "add"
    REMOVE = "remove"


class ResultStatus(str, Enum):
    """Final status of a reconcile run.

    Attributes:
        APPLIED: Both stores were mutated.
        CANCELLED: The operator declined; nothing was mutated.
        DRY_RUN: The change was only displayed.
    """

    APPLIED = "applied"
    CANCELLED = "cancelled"
    DRY_RUN = "dry_run"


@dataclass(frozen=True, slots=True)
class PendingChange:
    """A not-yet-applied automount change for one device.

    Attributes:
        kind: Whether the automount is being added or removed.
        device: Block device path given by the operator.
        record: fstab record to append or delete.
        rule: udev rule to create or delete.
        table_path: fstab file being changed.
        rule_path: Rule file being created or deleted.
        directory_created: True if this run created the mount directory.
    """

    kind: ChangeKind
    device: str
    record: MountRecord
    rule: RuleFile
    table_path: Path
    rule_path: Path
    directory_created: bool = False

    @property
    def identity(self) -> str:
        """Filesystem UUID of the device."""
        return self.record.identity

    @property
    def mount_path(self) -> Path:
        """Mount point of the device."""
        return self.record.mount_path

    @property
    def is_add(self) -> bool:
        """Check if this change adds an automount."""
        return self.kind == ChangeKind.ADD


@dataclass(frozen=True, slots=True)
class ReconcileResult:
    """Outcome of a reconcile run.

    Attributes:
        change: The change that was reviewed.
        status: Whether the change was applied, cancelled or only displayed.
        backup_path: fstab snapshot taken before mutation, if any.
        directory_removed: True if the mount directory was deleted on remove.
        rules_reloaded: Reload outcome, None when the reload was skipped.
        warnings: Non-fatal problems encountered after the stores were updated.
    """

    change: PendingChange
    status: ResultStatus
    backup_path: Path | None = None
    directory_removed: bool = False
    rules_reloaded: bool | None = None
    warnings: tuple[str, ...] = ()

    @property
    def applied(self) -> bool:
        """Check if both stores were mutated."""
        return self.status == ResultStatus.APPLIED
