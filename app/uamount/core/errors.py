"""Exception hierarchy for uamount.

Input errors are raised before any store is read for mutation,
consistency errors when fstab and the udev rule store disagree with the
requested operation, and store I/O errors when a managed file cannot be
read, written, copied or deleted. All of them abort the run.
"""


class UamountError(Exception):
    """Base exception for all uamount errors."""


class InputError(UamountError):
    """Base exception for invalid user input."""


class DeviceUnresolvableError(InputError):
    """Raised when a device has no resolvable filesystem UUID."""


class TargetNotEmptyError(InputError):
    """Raised when the requested mount point exists and is not an empty directory."""


class ConsistencyError(UamountError):
    """Base exception for conflicting or missing state across the stores."""


class EntryNotFoundError(ConsistencyError):
    """Raised when fstab holds no entry for the device."""


class DuplicateEntryError(ConsistencyError):
    """Raised when fstab already holds an entry for the device, or holds several."""


class MalformedEntryError(ConsistencyError):
    """Raised when the fstab line for the device cannot be parsed."""


class RuleNotFoundError(ConsistencyError):
    """Raised when the expected udev rule file does not exist."""


class RuleAlreadyExistsError(ConsistencyError):
    """Raised when the udev rule file for a new automount already exists."""


class RuleMismatchError(ConsistencyError):
    """Raised when a udev rule file does not belong to the device."""


class StoreIOError(UamountError):
    """Raised when a managed file or directory cannot be accessed."""
