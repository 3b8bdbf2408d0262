"""Add command for creating a device automount.

Appends a UUID entry to fstab and creates the matching udev rule so the
device is mounted at the target whenever it is plugged in.
"""

from typing import Annotated

import typer

from uamount.cli.session import build_options, preset_from_flags, run


def add_automount(
    device: Annotated[
        str,
        typer.Argument(help="Block device to automount, e.g. /dev/sda1. Must be attached."),
    ],
    target: Annotated[
        str,
        typer.Argument(
            help="Mount point. A bare name is placed under /media "
            "(or /media/<sudo user> when that exists)."
        ),
    ],
    test: Annotated[
        bool,
        typer.Option("--test", "-t", help="Use ./test.txt as fstab and ./test/ for rules."),
    ] = False,
    no_backup: Annotated[
        bool,
        typer.Option("--no-backup", "-b", help="Do not back up fstab to fstab_BAK<N>."),
    ] = False,
    no_reload: Annotated[
        bool,
        typer.Option("--no-reload", "-r", help="Do not reload udev rules."),
    ] = False,
    udev_name: Annotated[
        str | None,
        typer.Option(
            "--udev-name",
            "-n",
            help="Name for the udev rule (uamount-<name>). Defaults to the device UUID.",
        ),
    ] = None,
    udev_priority: Annotated[
        int | None,
        typer.Option("--udev-priority", "-p", help="Priority of the udev rule (default 99)."),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Answer yes to all questions."),
    ] = False,
    no: Annotated[
        bool,
        typer.Option("--no", help="Answer no to all questions."),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be done without making changes."),
    ] = False,
) -> None:
    """Automount DEVICE to TARGET.

    Examples:
        sudo uamount add /dev/sda1 MYDRIVE
        sudo uamount add /dev/sda1 MYDRIVE -p 80 -n mydrive
    """
    options = build_options(
        test_mode=test,
        backup_enabled=False if no_backup else None,
        reload_rules=False if no_reload else None,
        rule_label=udev_name,
        rule_priority=udev_priority,
        preset_answer=preset_from_flags(yes, no),
        dry_run=dry_run,
    )
    run(device, target, options)
