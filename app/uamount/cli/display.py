"""Shared Rich display functions for pending changes and results.

Provides the change table shown before the operator is asked to
confirm, and the summary printed after a run.
"""

from rich.markup import escape
from rich.table import Table

from uamount.models.change import PendingChange, ReconcileResult, ResultStatus
from uamount.utils.formatting import console, print_info, print_success, print_warning


def create_change_table(change: PendingChange, dry_run: bool = False) -> Table:
    """Create a Rich table displaying a pending change.

    One row per store touched: the fstab line, the udev rule file and,
    on add, a mount point directory created by this run.

    Args:
        change: The change to display.
        dry_run: Whether this is a dry-run (changes table title).

    Returns:
        Rich Table configured for change display.
    """
    verb = "Add" if change.is_add else "Remove"
    title = f"{verb} automount for {change.identity}"
    if dry_run:
        title += " (Dry Run)"

    table = Table(
        title=escape(title),
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Action", width=8, justify="center")
    table.add_column("Target", no_wrap=True)
    table.add_column("Details")

    line = escape(change.record.to_line())
    table_file = escape(str(change.table_path))
    rule_file = escape(str(change.rule_path))

    if change.is_add:
        table.add_row("[added]+append[/added]", table_file, f"[added]{line}[/added]")
        table.add_row("[added]+create[/added]", rule_file, "[muted]udev rule[/muted]")
        if change.directory_created:
            table.add_row(
                "[added]+create[/added]",
                escape(str(change.mount_path)),
                "[muted]mount point[/muted]",
            )
    else:
        table.add_row("[removed]-remove[/removed]", table_file, f"[removed]{line}[/removed]")
        table.add_row("[removed]-delete[/removed]", rule_file, "[muted]udev rule[/muted]")

    return table


def print_pending_change(change: PendingChange, dry_run: bool = False) -> None:
    """Print the change table for a pending change."""
    console.print(create_change_table(change, dry_run=dry_run))


def print_result(result: ReconcileResult) -> None:
    """Print the outcome of a reconcile run.

    Args:
        result: Result returned by the Reconciler.
    """
    change = result.change

    if result.status == ResultStatus.DRY_RUN:
        print_info("Dry-run mode: No changes were made.")
        return
    if result.status == ResultStatus.CANCELLED:
        print_info("Aborted. No changes were made.")
        return

    if result.backup_path is not None:
        print_info(escape(f'"{change.table_path}" backed up as "{result.backup_path}"'))

    if change.is_add:
        print_info(escape(f'Added mount info to "{change.table_path}"'))
        print_info(escape(f'Udev rule "{change.rule_path}" has been created'))
    else:
        print_info(escape(f'Mount info removed from "{change.table_path}"'))
        print_info(escape(f'Udev rule "{change.rule_path}" has been removed'))
        if result.directory_removed:
            print_info(escape(f'"{change.mount_path}" successfully removed'))

    if result.rules_reloaded is None:
        print_info("Udev rules not reloaded!")
    elif result.rules_reloaded:
        print_info("Udev rules reloaded.")

    for warning in result.warnings:
        print_warning(escape(warning))

    print_success("Done!")
