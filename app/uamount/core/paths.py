"""Path management for uamount.

System locations of the two managed stores, their test-mode
replacements, and the XDG-compliant configuration directory.

XDG defaults:
- Config: ~/.config/uamount/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "uamount"

# Managed stores on a live system
FSTAB_PATH = Path("/etc/fstab")
UDEV_RULES_DIR = Path("/lib/udev/rules.d")

# Test mode redirects both stores into the working directory
TEST_FSTAB_PATH = Path("./test.txt")
TEST_RULES_DIR = Path("./test")

# Base directory for bare mount point names
MEDIA_BASE = Path("/media")


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/uamount/ (or XDG_CONFIG_HOME/uamount/).
    """
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_config_path() -> Path:
    """Get the default configuration file path.

    Returns:
        Path to ~/.config/uamount/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_theme_path() -> Path:
    """Get the user theme configuration path.

    Returns:
        Path to ~/.config/uamount/theme.toml.
    """
    return get_config_dir() / "theme.toml"


def get_table_path(test_mode: bool = False) -> Path:
    """Get the mount table path for the current mode.

    Args:
        test_mode: If True, return the local test file instead of /etc/fstab.

    Returns:
        Path to the mount table file.
    """
    return TEST_FSTAB_PATH if test_mode else FSTAB_PATH


def get_rules_dir(test_mode: bool = False) -> Path:
    """Get the udev rules directory for the current mode.

    Args:
        test_mode: If True, return the local test directory.

    Returns:
        Path to the directory holding uamount rule files.
    """
    return TEST_RULES_DIR if test_mode else UDEV_RULES_DIR
