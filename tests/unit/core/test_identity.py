"""Unit tests for device identity resolution."""

import subprocess
from unittest.mock import patch

import pytest
from uamount.core.errors import DeviceUnresolvableError
from uamount.core.identity import is_block_device, resolve
from uamount.utils.shell import CommandResult


class TestIsBlockDevice:
    """Tests for is_block_device."""

    def test_missing_path(self) -> None:
        """A missing path is not a block device."""
        assert is_block_device("/dev/does-not-exist-uamount") is False

    def test_regular_file(self, tmp_path) -> None:
        """A regular file is not a block device."""
        path = tmp_path / "file"
        path.write_text("")

        assert is_block_device(str(path)) is False


class TestResolve:
    """Tests for resolve."""

    def test_success(self) -> None:
        """The blkid output is returned stripped."""
        with (
            patch("uamount.core.identity.is_block_device", return_value=True),
            patch(
                "uamount.core.identity.run_command",
                return_value=CommandResult(stdout="ABCD-1234\n", stderr="", returncode=0),
            ) as mock_run,
        ):
            assert resolve("/dev/sdz1") == "ABCD-1234"

        args = mock_run.call_args.args[0]
        assert args == ["blkid", "-o", "value", "-s", "UUID", "/dev/sdz1"]

    def test_not_under_dev(self) -> None:
        """Paths outside /dev are rejected without running blkid."""
        with patch("uamount.core.identity.run_command") as mock_run:
            with pytest.raises(DeviceUnresolvableError, match="No such block device"):
                resolve("/tmp/sdz1")

        mock_run.assert_not_called()

    def test_not_a_block_device(self) -> None:
        """A /dev path that is not a block device is rejected."""
        with patch("uamount.core.identity.is_block_device", return_value=False):
            with pytest.raises(DeviceUnresolvableError):
                resolve("/dev/null")

    def test_no_uuid(self) -> None:
        """A device without a filesystem UUID cannot be resolved."""
        with (
            patch("uamount.core.identity.is_block_device", return_value=True),
            patch(
                "uamount.core.identity.run_command",
                return_value=CommandResult(stdout="", stderr="", returncode=2),
            ),
        ):
            with pytest.raises(DeviceUnresolvableError, match="Unable to get UUID"):
                resolve("/dev/sdz1")

    def test_blkid_missing(self) -> None:
        """A missing blkid binary is reported as unresolvable."""
        with (
            patch("uamount.core.identity.is_block_device", return_value=True),
            patch("uamount.core.identity.run_command", side_effect=FileNotFoundError("blkid")),
        ):
            with pytest.raises(DeviceUnresolvableError):
                resolve("/dev/sdz1")

    def test_blkid_timeout(self) -> None:
        """A hanging blkid is reported as unresolvable."""
        with (
            patch("uamount.core.identity.is_block_device", return_value=True),
            patch(
                "uamount.core.identity.run_command",
                side_effect=subprocess.TimeoutExpired(cmd="blkid", timeout=30),
            ),
        ):
            with pytest.raises(DeviceUnresolvableError):
                resolve("/dev/sdz1")
