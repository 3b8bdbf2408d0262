"""udev rule file model.

A uamount rule file carries two directives for one filesystem UUID:
mount on the add event, unmount on the remove event.
"""

import re
from dataclasses import dataclass

RULE_NAMESPACE = "uamount"
DEFAULT_PRIORITY = 99

MOUNT_COMMAND = "/bin/mount"
UNMOUNT_COMMAND = "/bin/umount"

# Matches the identity constraint of a directive and captures the UUID
_IDENTITY_MATCH = re.compile(r'ENV\{ID_FS_UUID_ENC\}=="([^"]*)"')


def rule_filename(priority: int, label: str) -> str:
    """Build the rule file name for a priority and label.

    Args:
        priority: udev priority, lower numbers load earlier.
        label: Operator-chosen name or the device identity.

    Returns:
        File name in the form ``{priority}-uamount-{label}.rules``.

    Raises:
        ValueError: If the label is empty or not a single path component.
    """
    if not label:
        msg = "Rule label cannot be empty"
        raise ValueError(msg)
    if "/" in label or any(c.isspace() for c in label):
        msg = f"Rule label must not contain '/' or whitespace: {label!r}"
        raise ValueError(msg)
    if priority < 0:
        msg = f"Rule priority must not be negative, got {priority}"
        raise ValueError(msg)
    return f"{priority}-{RULE_NAMESPACE}-{label}.rules"


def referenced_identities(body: str) -> list[str | None]:
    """Return the identity each directive line of a rule body matches.

    Blank lines and comments are skipped. A directive without an
    identity constraint yields None.

    Args:
        body: Contents of a rule file.

    Returns:
        One entry per directive line, in file order.
    """
    identities: list[str | None] = []
    for line in body.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        match = _IDENTITY_MATCH.search(stripped)
        identities.append(match.group(1) if match else None)
    return identities


@dataclass(frozen=True, slots=True)
class RuleFile:
    """Automount rule for a single device.

    Attributes:
        identity: Filesystem UUID the directives are constrained to.
        priority: udev priority used in the file name.
        label: Name part of the file; the identity when not chosen by the operator.
    """

    identity: str
    priority: int = DEFAULT_PRIORITY
    label: str | None = None

    def __post_init__(self) -> None:
        """Validate rule data after initialization."""
        if not self.identity:
            msg = "Device identity cannot be empty"
            raise ValueError(msg)
        # Validates label and priority
        rule_filename(self.priority, self.effective_label)

    @property
    def effective_label(self) -> str:
        """Label used in the file name."""
        return self.label or self.identity

    @property
    def filename(self) -> str:
        """Rule file name."""
        return rule_filename(self.priority, self.effective_label)

    def render(self) -> str:
        """Render the rule file body."""
        match = f'ENV{{ID_FS_UUID_ENC}}=="{self.identity}"'
        return (
            f'ACTION=="add", {match}, RUN+="{MOUNT_COMMAND} /dev/%k"\n'
            f'ACTION=="remove", {match}, RUN+="{UNMOUNT_COMMAND} /dev/%k"\n'
        )

    def matches(self, body: str) -> bool:
        """Check that every directive of a rule body targets this identity.

        Args:
            body: Contents of an existing rule file.

        Returns:
            True if the body has at least one directive and all of them
            are constrained to this rule's identity.
        """
        identities = referenced_identities(body)
        return bool(identities) and all(i == self.identity for i in identities)
