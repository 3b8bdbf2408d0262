"""Remove command for deleting a device automount.

Deletes the device's fstab entry and udev rule, then optionally unmounts
the device and deletes its (empty) mount point.
"""

from typing import Annotated

import typer

from uamount.cli.session import build_options, preset_from_flags, run


def remove_automount(
    device: Annotated[
        str,
        typer.Argument(help="Block device whose automount is removed. Must be attached."),
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
    no_delete: Annotated[
        bool,
        typer.Option("--no-delete", "-d", help="Do not offer to delete the mount point."),
    ] = False,
    udev_name: Annotated[
        str | None,
        typer.Option(
            "--udev-name",
            "-n",
            help="Name the udev rule was created with. Required if it was not the default.",
        ),
    ] = None,
    udev_priority: Annotated[
        int | None,
        typer.Option(
            "--udev-priority",
            "-p",
            help="Priority the udev rule was created with. Required if it was not 99.",
        ),
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
    """Remove the automount of DEVICE.

    The udev rule name and priority are not stored in fstab, so non-default
    values used when adding must be given again.

    Examples:
        sudo uamount remove /dev/sda1
        sudo uamount remove /dev/sda1 -p 80 -n mydrive
    """
    options = build_options(
        test_mode=test,
        backup_enabled=False if no_backup else None,
        reload_rules=False if no_reload else None,
        delete_mount_point=False if no_delete else None,
        rule_label=udev_name,
        rule_priority=udev_priority,
        preset_answer=preset_from_flags(yes, no),
        dry_run=dry_run,
    )
    run(device, None, options)
