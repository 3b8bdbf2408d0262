"""udev rule store.

Creates, validates and deletes the per-device rule files uamount keeps
in the udev rules directory.
"""

import logging
from pathlib import Path

from uamount.core.errors import StoreIOError
from uamount.models.rule import RuleFile, rule_filename

logger = logging.getLogger(__name__)


class RuleStore:
    """File access for uamount udev rules.

    Attributes:
        rules_dir: Directory the rule files live in.
    """

    def __init__(self, rules_dir: Path) -> None:
        """Initialize the store.

        Args:
            rules_dir: udev rules directory (usually /lib/udev/rules.d).
        """
        self._rules_dir = rules_dir

    @property
    def rules_dir(self) -> Path:
        """Directory holding the rule files."""
        return self._rules_dir

    def rule_path(self, priority: int, label: str) -> Path:
        """Return the path of the rule file for a priority and label.

        Raises:
            ValueError: If the label is not a valid file name component.
        """
        return self._rules_dir / rule_filename(priority, label)

    def exists(self, path: Path) -> bool:
        """Check if a rule file exists."""
        return path.exists()

    def write(self, path: Path, identity: str) -> None:
        """Write the add/remove directives for a device.

        Args:
            path: Rule file to create.
            identity: Filesystem UUID the directives match.

        Raises:
            StoreIOError: If the file cannot be written.
        """
        body = RuleFile(identity=identity).render()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(body, encoding="utf-8")
        except OSError as e:
            raise StoreIOError(f'Failed to write udev rule "{path}": {e}') from e
        logger.info("Created udev rule %s", path)

    def validate_ownership(self, path: Path, identity: str) -> bool:
        """Check that a rule file belongs to a device.

        Args:
            path: Existing rule file.
            identity: Filesystem UUID the file must be constrained to.

        Returns:
            True if every directive in the file matches the identity.

        Raises:
            StoreIOError: If the file cannot be read.
        """
        try:
            body = path.read_text(encoding="utf-8")
        except OSError as e:
            raise StoreIOError(f'Failed to read udev rule "{path}": {e}') from e
        return RuleFile(identity=identity).matches(body)

    def delete(self, path: Path) -> None:
        """Delete a rule file.

        Raises:
            StoreIOError: If the file cannot be deleted.
        """
        try:
            path.unlink()
        except OSError as e:
            raise StoreIOError(f'Failed to delete udev rule "{path}": {e}') from e
        logger.info("Removed udev rule %s", path)
