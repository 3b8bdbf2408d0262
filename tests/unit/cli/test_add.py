"""Unit tests for the add command.

Runs the CLI in test mode against ./test.txt and ./test/ inside a
temporary working directory.
"""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner
from uamount.cli.main import app

runner = CliRunner()

DEVICE = "/dev/sdz1"
UUID = "ABCD-1234"


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, fstab_text: str) -> Path:
    """Working directory holding the test-mode stores."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "test.txt").write_text(fstab_text)
    (tmp_path / "mnt").mkdir()
    return tmp_path


@pytest.fixture(autouse=True)
def fixed_uuid() -> Iterator[MagicMock]:
    """Resolve every device to UUID."""
    with patch("uamount.core.identity.resolve", return_value=UUID) as mock_resolve:
        yield mock_resolve


class TestAddCommand:
    """Tests for uamount add."""

    def test_add_help(self) -> None:
        """Add command shows help."""
        result = runner.invoke(app, ["add", "--help"])

        assert result.exit_code == 0
        assert "Automount DEVICE to TARGET" in result.output

    def test_add_with_yes(self, workdir: Path, fstab_text: str, rule_body: str) -> None:
        """--yes applies the change without prompting."""
        result = runner.invoke(app, ["add", DEVICE, "mnt/MYDRIVE", "--test", "--yes"])

        assert result.exit_code == 0, result.output
        assert "Done!" in result.output
        assert (workdir / "mnt" / "MYDRIVE").is_dir()
        mount_path = (workdir / "mnt" / "MYDRIVE").resolve()
        expected = f"UUID={UUID} {mount_path} auto defaults,noauto 0 0\n"
        assert (workdir / "test.txt").read_text() == fstab_text + expected
        assert (workdir / "test" / f"99-uamount-{UUID}.rules").read_text() == rule_body
        assert (workdir / "test.txt_BAK1").read_text() == fstab_text
        assert "Udev rules not reloaded!" in result.output

    def test_add_interactive_accept(self, workdir: Path) -> None:
        """Answering yes at the prompt applies the change."""
        result = runner.invoke(app, ["add", DEVICE, "mnt/MYDRIVE", "--test"], input="yes\n")

        assert result.exit_code == 0, result.output
        assert "Do you want to continue?" in result.output
        assert (workdir / "test" / f"99-uamount-{UUID}.rules").exists()

    def test_add_interactive_reprompt(self, workdir: Path) -> None:
        """Unrecognized answers ask again."""
        result = runner.invoke(
            app, ["add", DEVICE, "mnt/MYDRIVE", "--test"], input="maybe\nY\n"
        )

        assert result.exit_code == 0, result.output
        assert result.output.count("Do you want to continue?") == 2

    def test_add_declined(self, workdir: Path, fstab_text: str) -> None:
        """Declining exits cleanly and leaves nothing behind."""
        result = runner.invoke(app, ["add", DEVICE, "mnt/MYDRIVE", "--test"], input="no\n")

        assert result.exit_code == 0
        assert "Aborted" in result.output
        assert not (workdir / "mnt" / "MYDRIVE").exists()
        assert (workdir / "test.txt").read_text() == fstab_text
        assert not (workdir / "test").exists()

    def test_add_with_no_preset(self, workdir: Path, fstab_text: str) -> None:
        """--no declines without prompting."""
        result = runner.invoke(app, ["add", DEVICE, "mnt/MYDRIVE", "--test", "--no"])

        assert result.exit_code == 0
        assert "Aborted" in result.output
        assert (workdir / "test.txt").read_text() == fstab_text

    def test_add_dry_run(self, workdir: Path, fstab_text: str) -> None:
        """--dry-run shows the change and writes nothing."""
        result = runner.invoke(app, ["add", DEVICE, "mnt/MYDRIVE", "--test", "--dry-run"])

        assert result.exit_code == 0
        assert "Dry-run mode" in result.output
        assert f"Add automount for {UUID}" in result.output
        assert not (workdir / "mnt" / "MYDRIVE").exists()
        assert (workdir / "test.txt").read_text() == fstab_text

    def test_add_no_backup(self, workdir: Path) -> None:
        """--no-backup skips the fstab snapshot."""
        result = runner.invoke(
            app, ["add", DEVICE, "mnt/MYDRIVE", "--test", "--yes", "--no-backup"]
        )

        assert result.exit_code == 0, result.output
        assert not (workdir / "test.txt_BAK1").exists()

    def test_add_custom_rule(self, workdir: Path) -> None:
        """-n and -p choose the rule file name."""
        result = runner.invoke(
            app, ["add", DEVICE, "mnt/MYDRIVE", "--test", "-y", "-n", "mydrive", "-p", "80"]
        )

        assert result.exit_code == 0, result.output
        assert (workdir / "test" / "80-uamount-mydrive.rules").exists()

    def test_add_twice_fails(self, workdir: Path) -> None:
        """A second add for the same device exits with an error."""
        runner.invoke(app, ["add", DEVICE, "mnt/MYDRIVE", "--test", "--yes"])
        before = (workdir / "test.txt").read_text()

        result = runner.invoke(app, ["add", DEVICE, "mnt/OTHER", "--test", "--yes"])

        assert result.exit_code == 1
        assert "already present" in result.output
        assert (workdir / "test.txt").read_text() == before

    def test_add_target_not_empty(self, workdir: Path) -> None:
        """A non-empty mount point exits with an error."""
        (workdir / "mnt" / "MYDRIVE").mkdir()
        (workdir / "mnt" / "MYDRIVE" / "file").write_text("x")

        result = runner.invoke(app, ["add", DEVICE, "mnt/MYDRIVE", "--test", "--yes"])

        assert result.exit_code == 1
        assert "must be empty" in result.output

    def test_add_yes_and_no(self, workdir: Path) -> None:
        """--yes and --no together are rejected."""
        result = runner.invoke(app, ["add", DEVICE, "mnt/MYDRIVE", "--test", "--yes", "--no"])

        assert result.exit_code == 1
        assert "cannot be used together" in result.output

    def test_add_invalid_label(self, workdir: Path) -> None:
        """A rule name with a slash is rejected."""
        result = runner.invoke(app, ["add", DEVICE, "mnt/MYDRIVE", "--test", "-n", "a/b"])

        assert result.exit_code == 1
        assert "Invalid option" in result.output

    def test_add_requires_root(self, workdir: Path) -> None:
        """Without --test the command must run as root."""
        with patch("uamount.cli.session.os.geteuid", return_value=1000):
            result = runner.invoke(app, ["add", DEVICE, "MYDRIVE"])

        assert result.exit_code == 1
        assert "must be run as root" in result.output

    def test_add_uses_config_defaults(self, workdir: Path, tmp_path: Path) -> None:
        """Defaults from the config file apply when no flag overrides them."""
        config_dir = tmp_path / "xdg-config" / "uamount"
        config_dir.mkdir(parents=True)
        (config_dir / "config.toml").write_text("backup_enabled = false\nrule_priority = 70\n")

        result = runner.invoke(app, ["add", DEVICE, "mnt/MYDRIVE", "--test", "--yes"])

        assert result.exit_code == 0, result.output
        assert not (workdir / "test.txt_BAK1").exists()
        assert (workdir / "test" / f"70-uamount-{UUID}.rules").exists()
