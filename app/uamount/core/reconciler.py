"""Automount reconciliation.

The Reconciler is the only component that looks at fstab and the udev
rule store together. For one device it decides between add and remove,
refuses to act when the two stores disagree, shows the pending change,
and applies it in a fixed order:

    backup -> fstab -> udev rule

There is no transaction across the two files. A crash after the fstab
write and before the rule write leaves an fstab entry without a rule;
rerunning remove reports the missing rule instead of guessing.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from uamount.core import identity as device_identity
from uamount.core.backup import BackupManager
from uamount.core.config import ReconcileOptions
from uamount.core.confirm import ConfirmationGate
from uamount.core.errors import (
    DuplicateEntryError,
    EntryNotFoundError,
    InputError,
    RuleAlreadyExistsError,
    RuleMismatchError,
    RuleNotFoundError,
    StoreIOError,
    TargetNotEmptyError,
)
from uamount.core.fstab import MountTableStore
from uamount.core.host import HostOperations
from uamount.core.paths import get_rules_dir, get_table_path
from uamount.core.rules import RuleStore
from uamount.models.change import ChangeKind, PendingChange, ReconcileResult, ResultStatus
from uamount.models.mount import MountRecord, build_options
from uamount.models.rule import RuleFile

logger = logging.getLogger(__name__)

Resolver = Callable[[str], str]


class Reconciler:
    """Adds or removes the fstab entry and udev rule of one device.

    Attributes:
        options: Settings of this run.
        table: fstab store.
        rules: udev rule store.
    """

    def __init__(
        self,
        options: ReconcileOptions,
        table: MountTableStore,
        rules: RuleStore,
        backups: BackupManager,
        gate: ConfirmationGate,
        host: HostOperations,
        resolver: Resolver | None = None,
    ) -> None:
        self.options = options
        self.table = table
        self.rules = rules
        self._backups = backups
        self._gate = gate
        self._host = host
        self._resolve = resolver or device_identity.resolve

    @classmethod
    def from_options(
        cls,
        options: ReconcileOptions,
        gate: ConfirmationGate,
        resolver: Resolver | None = None,
    ) -> "Reconciler":
        """Wire a Reconciler to the system stores (or the test stores).

        Args:
            options: Settings of this run.
            gate: Confirmation gate to ask the operator through.
            resolver: Maps a device path to its filesystem UUID.

        Returns:
            A ready Reconciler.
        """
        return cls(
            options=options,
            table=MountTableStore(get_table_path(options.test_mode)),
            rules=RuleStore(get_rules_dir(options.test_mode)),
            backups=BackupManager(enabled=options.backup_enabled),
            gate=gate,
            host=HostOperations(test_mode=options.test_mode),
            resolver=resolver,
        )

    def reconcile(self, device: str, target: str | None = None) -> ReconcileResult:
        """Add an automount when a target is given, remove it otherwise.

        Args:
            device: Block device path, e.g. /dev/sda1.
            target: Mount point name or path; None to remove.

        Returns:
            ReconcileResult describing what happened.

        Raises:
            UamountError: On any input, consistency or store I/O error.
        """
        if target is None:
            return self.remove(device)
        return self.add(device, target)

    # === Remove ===

    def remove(self, device: str) -> ReconcileResult:
        """Remove the automount of a device.

        Raises:
            EntryNotFoundError: If fstab has no entry for the device.
            DuplicateEntryError: If fstab has several entries for the device.
            MalformedEntryError: If the device's fstab line cannot be parsed.
            RuleNotFoundError: If the udev rule file does not exist.
            RuleMismatchError: If the rule file belongs to another device.
            StoreIOError: If a store cannot be read or written.
        """
        uuid = self._resolve(device)

        entries = self.table.entries_for(uuid)
        if len(entries) > 1:
            # remove_by_identity drops all of them; only one can be shown
            raise DuplicateEntryError(
                f'{len(entries)} entries for "{uuid}" in "{self.table.path}", '
                "remove the extra lines by hand"
            )
        record = self.table.find_by_identity(uuid)
        if record is None:
            raise EntryNotFoundError(f'No entry for "{uuid}" in "{self.table.path}"')
        mount_path = self.table.extract_mount_path(record)

        # Priority and label are not recorded in fstab; they must match add time
        rule = RuleFile(
            identity=uuid,
            priority=self.options.rule_priority,
            label=self.options.label_for(uuid),
        )
        rule_path = self.rules.rule_path(rule.priority, rule.effective_label)
        if not self.rules.exists(rule_path):
            raise RuleNotFoundError(f'Udev rule "{rule_path}" does not exist')
        if not self.rules.validate_ownership(rule_path, uuid):
            raise RuleMismatchError(
                f'Udev rule in "{rule_path}" does not match device id "{uuid}"'
            )

        change = PendingChange(
            kind=ChangeKind.REMOVE,
            device=device,
            record=record,
            rule=rule,
            table_path=self.table.path,
            rule_path=rule_path,
        )

        if self.options.dry_run:
            self._gate.present(change)
            return ReconcileResult(change=change, status=ResultStatus.DRY_RUN)

        if not self._gate.review(change):
            logger.info("Removal of %s declined", uuid)
            return ReconcileResult(change=change, status=ResultStatus.CANCELLED)

        backup_path = self._backups.snapshot(self.table.path)

        contents, removed = self.table.remove_by_identity(uuid)
        if not removed:
            raise EntryNotFoundError(f'No entry for "{uuid}" in "{self.table.path}"')
        self.table.write(contents)
        self.rules.delete(rule_path)

        warnings: list[str] = []
        directory_removed = False
        if self.options.delete_mount_point:
            question = (
                f'Do you want to remove the mount point "{mount_path}"? '
                "If a device is mounted to it, the device will be unmounted first."
            )
            if self._gate.confirm(question):
                directory_removed = self._remove_mount_point(device, mount_path, warnings)

        rules_reloaded = self._reload_rules(warnings)
        return ReconcileResult(
            change=change,
            status=ResultStatus.APPLIED,
            backup_path=backup_path,
            directory_removed=directory_removed,
            rules_reloaded=rules_reloaded,
            warnings=tuple(warnings),
        )

    def _remove_mount_point(self, device: str, path: Path, warnings: list[str]) -> bool:
        """Unmount the device and delete its mount point if empty.

        Every failure here is a warning: the stores are already updated.
        """
        if not self._host.unmount_if_mounted(device, path):
            warnings.append(f'Unable to unmount "{device}" from "{path}"')

        if not path.is_dir():
            warnings.append(f'"{path}" not removed, no such directory')
            return False

        try:
            empty = self._host.is_empty_dir(path)
        except StoreIOError as e:
            warnings.append(f'"{path}" not removed: {e}')
            return False
        if not empty:
            warnings.append(f'"{path}" not removed, directory not empty!')
            return False

        if not self._host.remove_dir(path):
            warnings.append(f'Unable to remove "{path}"')
            return False
        return True

    # === Add ===

    def add(self, device: str, target: str) -> ReconcileResult:
        """Add an automount for a device.

        Raises:
            DuplicateEntryError: If fstab already has a line keyed by the
                device, valid or not.
            RuleAlreadyExistsError: If the udev rule file already exists.
            TargetNotEmptyError: If the mount point exists and is not empty.
            StoreIOError: If a store or the mount point cannot be written.
        """
        uuid = self._resolve(device)
        mount_path = self.normalize_target(target)

        existing = self.table.entries_for(uuid)
        if existing:
            raise DuplicateEntryError(
                f'An entry for "{uuid}" is already present in "{self.table.path}": '
                f"{existing[0].strip()}"
            )

        rule = RuleFile(
            identity=uuid,
            priority=self.options.rule_priority,
            label=self.options.label_for(uuid),
        )
        rule_path = self.rules.rule_path(rule.priority, rule.effective_label)
        if self.rules.exists(rule_path):
            raise RuleAlreadyExistsError(f'The udev rule "{rule_path}" already exists')

        directory_created = self._prepare_mount_point(mount_path)
        created_now = directory_created and not self.options.dry_run

        try:
            record = MountRecord(
                identity=uuid,
                mount_path=mount_path.resolve(),
                options=build_options(self.options.sudo_uid, self.options.sudo_gid),
            )
            change = PendingChange(
                kind=ChangeKind.ADD,
                device=device,
                record=record,
                rule=rule,
                table_path=self.table.path,
                rule_path=rule_path,
                directory_created=directory_created,
            )

            if self.options.dry_run:
                self._gate.present(change)
                return ReconcileResult(change=change, status=ResultStatus.DRY_RUN)

            if not self._gate.review(change):
                logger.info("Automount of %s declined", uuid)
                if created_now:
                    self._host.remove_dir(mount_path)
                return ReconcileResult(change=change, status=ResultStatus.CANCELLED)

            backup_path = self._backups.snapshot(self.table.path)
            self.table.append(record)
        except BaseException:
            # Nothing was written; drop the directory made for this run
            if created_now:
                self._host.remove_dir(mount_path)
            raise

        self.rules.write(rule_path, uuid)

        warnings: list[str] = []
        rules_reloaded = self._reload_rules(warnings)
        return ReconcileResult(
            change=change,
            status=ResultStatus.APPLIED,
            backup_path=backup_path,
            rules_reloaded=rules_reloaded,
            warnings=tuple(warnings),
        )

    def normalize_target(self, target: str) -> Path:
        """Turn a mount point argument into a path.

        A bare name is placed under the media base directory, inside the
        invoking user's own directory when that exists
        (``/media/<user>/<name>``). Anything containing a slash is used as is.

        Raises:
            InputError: If the target is empty.
        """
        target = target.strip()
        if not target:
            raise InputError("Mount point cannot be empty")
        if "/" in target:
            return Path(target)

        base = self.options.media_base
        if self.options.sudo_user and (base / self.options.sudo_user).is_dir():
            base = base / self.options.sudo_user
        return base / target

    def _prepare_mount_point(self, path: Path) -> bool:
        """Make sure the mount point is an empty directory.

        Returns:
            True if the directory did not exist and belongs to this run.
            It is only created outside dry-run mode.

        Raises:
            TargetNotEmptyError: If the path exists and is not an empty directory.
            StoreIOError: If the directory cannot be read or created.
        """
        if path.is_dir():
            if not self._host.is_empty_dir(path):
                raise TargetNotEmptyError(f'The mount point "{path}" must be empty')
            return False
        if path.exists():
            raise TargetNotEmptyError(f'The mount point "{path}" is not a directory')

        if not self.options.dry_run:
            self._host.make_mount_dir(path, self.options.sudo_uid, self.options.sudo_gid)
        return True

    # === Shared ===

    def _reload_rules(self, warnings: list[str]) -> bool | None:
        """Reload udev rules unless disabled; failures are warnings."""
        if not self.options.should_reload_rules:
            logger.info("Udev rules not reloaded")
            return None
        if self._host.reload_rules():
            return True
        warnings.append("Failed to reload udev rules, run 'udevadm control --reload-rules'")
        return False
