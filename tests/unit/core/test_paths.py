"""Unit tests for path management.

Tests for the store locations and the XDG-compliant config directory.
"""

import os
from pathlib import Path
from unittest.mock import patch

from uamount.core.paths import (
    APP_NAME,
    get_config_dir,
    get_config_path,
    get_rules_dir,
    get_table_path,
    get_theme_path,
)


class TestGetConfigDir:
    """Tests for get_config_dir function."""

    def test_default_config_dir(self) -> None:
        """get_config_dir returns default path when XDG_CONFIG_HOME not set."""
        with patch.dict(os.environ, {}, clear=True):
            os.environ.pop("XDG_CONFIG_HOME", None)

            result = get_config_dir()

        assert result == Path.home() / ".config" / APP_NAME

    def test_respects_xdg_config_home(self, tmp_path: Path) -> None:
        """get_config_dir respects XDG_CONFIG_HOME environment variable."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            result = get_config_dir()

        assert result == tmp_path / APP_NAME

    def test_config_files(self, tmp_path: Path) -> None:
        """Config and theme files live in the config directory."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            assert get_config_path() == tmp_path / APP_NAME / "config.toml"
            assert get_theme_path() == tmp_path / APP_NAME / "theme.toml"


class TestStorePaths:
    """Tests for the managed store locations."""

    def test_system_paths(self) -> None:
        """Normal mode uses /etc/fstab and the udev rules directory."""
        assert get_table_path() == Path("/etc/fstab")
        assert get_rules_dir() == Path("/lib/udev/rules.d")

    def test_test_mode_paths(self) -> None:
        """Test mode uses files in the working directory."""
        assert get_table_path(test_mode=True) == Path("./test.txt")
        assert get_rules_dir(test_mode=True) == Path("./test")
