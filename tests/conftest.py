"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest

DEVICE = "/dev/sdz1"
UUID = "ABCD-1234"

SAMPLE_FSTAB = """# /etc/fstab: static file system information.
#
# <file system> <mount point>   <type>  <options>       <dump>  <pass>
UUID=1111-2222 /               ext4    errors=remount-ro 0       1
UUID=3333-4444 none            swap    sw              0       0
/dev/sr0        /media/cdrom0   udf,iso9660 user,noauto     0       0
"""


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep tests away from the real config directory and sudo environment."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    for name in ("SUDO_USER", "SUDO_UID", "SUDO_GID"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fstab_text() -> str:
    """Sample fstab contents without any uamount entry."""
    return SAMPLE_FSTAB


@pytest.fixture
def table_path(tmp_path: Path, fstab_text: str) -> Path:
    """Sample fstab file in a temporary directory."""
    path = tmp_path / "fstab"
    path.write_text(fstab_text)
    return path


@pytest.fixture
def rules_dir(tmp_path: Path) -> Path:
    """Empty udev rules directory."""
    path = tmp_path / "rules.d"
    path.mkdir()
    return path


@pytest.fixture
def rule_body() -> str:
    """Rule file body uamount writes for UUID."""
    return (
        f'ACTION=="add", ENV{{ID_FS_UUID_ENC}}=="{UUID}", RUN+="/bin/mount /dev/%k"\n'
        f'ACTION=="remove", ENV{{ID_FS_UUID_ENC}}=="{UUID}", RUN+="/bin/umount /dev/%k"\n'
    )
