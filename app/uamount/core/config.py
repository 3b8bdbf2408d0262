"""Configuration for uamount.

Two models live here:

- UamountConfig: persistent defaults stored in ~/.config/uamount/config.toml
- ReconcileOptions: the complete, explicit settings of one run, built by the
  CLI from the persistent defaults and command-line flags

The Reconciler reads nothing but the ReconcileOptions it is given.
"""

import logging
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from uamount.core.confirm import PresetAnswer
from uamount.core.errors import UamountError
from uamount.core.paths import MEDIA_BASE, get_config_path
from uamount.models.rule import DEFAULT_PRIORITY

logger = logging.getLogger(__name__)


class UamountConfig(BaseModel):
    """Persistent defaults for uamount.

    Attributes:
        backup_enabled: Back up fstab before every change.
        reload_rules: Reload udev rules after a successful change.
        delete_mount_point: Offer to delete the mount point on remove.
        rule_priority: Default udev rule priority.
        media_base: Base directory for bare mount point names.
    """

    model_config = ConfigDict(extra="forbid")

    backup_enabled: Annotated[
        bool,
        Field(description="Back up fstab to fstab_BAK<N> before changing it"),
    ] = True
    reload_rules: Annotated[
        bool,
        Field(description="Reload udev rules after a successful change"),
    ] = True
    delete_mount_point: Annotated[
        bool,
        Field(description="Offer to delete the mount point when removing"),
    ] = True
    rule_priority: Annotated[
        int,
        Field(ge=0, description="udev rule priority, lower numbers load earlier"),
    ] = DEFAULT_PRIORITY
    media_base: Annotated[
        Path,
        Field(description="Base directory for bare mount point names"),
    ] = MEDIA_BASE


class ReconcileOptions(UamountConfig):
    """Settings of a single add or remove run.

    Attributes:
        rule_label: Name part of the rule file, None to use the device UUID.
        preset_answer: Answer every question without prompting.
        test_mode: Use ./test.txt and ./test/ instead of the system stores.
        dry_run: Show the change without applying it.
        sudo_user: Name of the user who invoked sudo.
        sudo_uid: uid of the user who invoked sudo.
        sudo_gid: gid of the user who invoked sudo.
    """

    rule_label: Annotated[
        str | None,
        Field(description="udev rule name, defaults to the device UUID"),
    ] = None
    preset_answer: Annotated[
        PresetAnswer,
        Field(description="Preset answer to all questions"),
    ] = PresetAnswer.NONE
    test_mode: Annotated[
        bool,
        Field(description="Redirect both stores to local test paths"),
    ] = False
    dry_run: Annotated[
        bool,
        Field(description="Show the change without applying it"),
    ] = False
    sudo_user: str | None = None
    sudo_uid: int | None = None
    sudo_gid: int | None = None

    @field_validator("rule_label")
    @classmethod
    def validate_rule_label(cls, v: str | None) -> str | None:
        """Reject labels that are not a single file name component."""
        if v is None:
            return v
        label = v.strip()
        if not label:
            msg = "rule label cannot be empty"
            raise ValueError(msg)
        if "/" in label or any(c.isspace() for c in label):
            msg = f"rule label must not contain '/' or whitespace: {v!r}"
            raise ValueError(msg)
        return label

    @property
    def should_reload_rules(self) -> bool:
        """Whether udev rules are reloaded; never in test mode."""
        return self.reload_rules and not self.test_mode

    def label_for(self, identity: str) -> str:
        """Return the rule label for a device identity."""
        return self.rule_label or identity

    @classmethod
    def from_config(cls, config: UamountConfig, **overrides: object) -> "ReconcileOptions":
        """Build run options from persistent defaults.

        Args:
            config: Persistent defaults.
            **overrides: Values given on the command line; None values are ignored.

        Returns:
            Validated ReconcileOptions.
        """
        data: dict[str, object] = config.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(data)


class ConfigError(UamountError):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def sudo_identity(environ: Mapping[str, str] | None = None) -> dict[str, object]:
    """Read the invoking user from the sudo environment.

    Args:
        environ: Environment to read, defaults to os.environ.

    Returns:
        Dictionary with sudo_user, sudo_uid and sudo_gid (None when unset).
    """
    env = os.environ if environ is None else environ

    def _int_or_none(name: str) -> int | None:
        value = env.get(name, "").strip()
        if not value:
            return None
        try:
            return int(value)
        except ValueError:
            logger.warning("Ignoring non-numeric %s=%r", name, value)
            return None

    return {
        "sudo_user": env.get("SUDO_USER") or None,
        "sudo_uid": _int_or_none("SUDO_UID"),
        "sudo_gid": _int_or_none("SUDO_GID"),
    }


def load_config(path: Path | None = None) -> UamountConfig:
    """Load persistent defaults from a TOML file.

    A missing file yields the built-in defaults.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated UamountConfig object.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or does not match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        logger.debug("No config file at %s, using defaults", config_path)
        return UamountConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {config_path}: {e}") from e

    try:
        return UamountConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content in {config_path}: {e}") from e


def save_config(config: UamountConfig, path: Path | None = None) -> Path:
    """Save persistent defaults to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The UamountConfig to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    data = _config_to_dict(config)

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config {config_path}: {e}") from e

    return config_path


def _config_to_dict(config: UamountConfig) -> dict[str, object]:
    """Convert UamountConfig to a dictionary for TOML serialization."""
    return {
        "backup_enabled": config.backup_enabled,
        "reload_rules": config.reload_rules,
        "delete_mount_point": config.delete_mount_point,
        "rule_priority": config.rule_priority,
        "media_base": str(config.media_base),
    }
