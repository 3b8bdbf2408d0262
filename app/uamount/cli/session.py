"""Shared run logic for the add and remove commands.

Builds the run options from the config file and command-line flags,
wires the Reconciler to a Typer-backed confirmation gate, and maps
errors to exit codes.
"""

import os

import typer
from rich.markup import escape

from uamount.cli.display import print_pending_change, print_result
from uamount.core.config import ConfigError, ReconcileOptions, load_config, sudo_identity
from uamount.core.confirm import ConfirmationGate, PresetAnswer
from uamount.core.errors import UamountError
from uamount.core.reconciler import Reconciler
from uamount.models.change import PendingChange
from uamount.utils.formatting import print_error


def preset_from_flags(yes: bool, no: bool) -> PresetAnswer:
    """Map --yes/--no to a preset answer.

    Raises:
        typer.Exit: If both flags are given.
    """
    if yes and no:
        print_error("--yes and --no cannot be used together.")
        raise typer.Exit(code=1)
    if yes:
        return PresetAnswer.YES
    if no:
        return PresetAnswer.NO
    return PresetAnswer.NONE


def build_options(**flags: object) -> ReconcileOptions:
    """Merge config file defaults, sudo identity and command-line flags.

    Flags set to None keep the config file value.

    Raises:
        typer.Exit: If the config file or a flag value is invalid.
    """
    try:
        config = load_config()
    except ConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    try:
        return ReconcileOptions.from_config(config, **sudo_identity(), **flags)
    except ValueError as e:
        print_error(escape(f"Invalid option: {e}"))
        raise typer.Exit(code=1) from e


def require_root(options: ReconcileOptions) -> None:
    """Refuse to touch the system stores without root privileges.

    Raises:
        typer.Exit: If not running as root outside test mode.
    """
    if options.test_mode:
        return
    if os.geteuid() != 0:
        print_error("This command must be run as root (sudo it)!")
        raise typer.Exit(code=1)


def _prompt(question: str) -> str:
    return typer.prompt(
        typer.style(f"{question} [Yes|No]", fg=typer.colors.BLUE, bold=True),
        prompt_suffix=" > ",
    )


def create_gate(options: ReconcileOptions) -> ConfirmationGate:
    """Create a confirmation gate that prompts through Typer."""

    def _present(change: PendingChange) -> None:
        print_pending_change(change, dry_run=options.dry_run)

    return ConfirmationGate(
        preset=options.preset_answer,
        prompter=_prompt,
        presenter=_present,
    )


def run(device: str, target: str | None, options: ReconcileOptions) -> None:
    """Run one reconcile and print its outcome.

    Args:
        device: Block device path.
        target: Mount point for add, None for remove.
        options: Settings of this run.

    Raises:
        typer.Exit: With code 1 on any uamount error.
    """
    require_root(options)

    reconciler = Reconciler.from_options(options, create_gate(options))
    try:
        result = reconciler.reconcile(device, target)
    except UamountError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    print_result(result)
