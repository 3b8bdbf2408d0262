"""Operator confirmation.

The gate blocks until the operator answers yes or no. A preset answer
(``--yes`` / ``--no``) bypasses the prompt for batch use. The prompt
and the change presenter are injected so the gate can be driven by
scripted answers in tests.
"""

import logging
from collections.abc import Callable
from enum import Enum

from uamount.models.change import PendingChange

logger = logging.getLogger(__name__)

PRIMARY_QUESTION = "Do you want to continue?"

_AFFIRMATIVE = frozenset({"yes", "y"})
_NEGATIVE = frozenset({"no", "n"})

Prompter = Callable[[str], str]
Presenter = Callable[[PendingChange], None]


class PresetAnswer(str, Enum):
    """Answer given to every question without prompting.

    Attributes:
        YES: Accept all questions.
        NO: Decline all questions.
        NONE: Ask the operator.
    """

    YES = "yes"
    NO = "no"
    NONE = "none"


def _ask_stdin(prompt: str) -> str:
    return input(f"{prompt} [Yes|No] > ")


def _present_nothing(change: PendingChange) -> None:
    logger.info("Pending %s for %s", change.kind.value, change.identity)


class ConfirmationGate:
    """Asks the operator to accept or decline changes.

    Attributes:
        _preset: Preset answer, NONE to prompt.
        _prompter: Callable returning the raw answer for a question.
        _presenter: Callable that displays a pending change.
    """

    def __init__(
        self,
        preset: PresetAnswer = PresetAnswer.NONE,
        prompter: Prompter | None = None,
        presenter: Presenter | None = None,
    ) -> None:
        """Initialize the gate.

        Args:
            preset: Answer to return without prompting.
            prompter: Reads one answer; defaults to reading stdin.
            presenter: Displays a change before review; defaults to logging it.
        """
        self._preset = preset
        self._prompter = prompter or _ask_stdin
        self._presenter = presenter or _present_nothing

    @property
    def preset(self) -> PresetAnswer:
        """The preset answer."""
        return self._preset

    def confirm(self, prompt: str) -> bool:
        """Ask a yes/no question.

        Answers are case-insensitive; anything other than yes/y or no/n
        repeats the question.

        Args:
            prompt: Question to ask.

        Returns:
            True if accepted, False if declined.
        """
        if self._preset == PresetAnswer.YES:
            logger.info("%s -> yes (preset)", prompt)
            return True
        if self._preset == PresetAnswer.NO:
            logger.info("%s -> no (preset)", prompt)
            return False

        while True:
            answer = self._prompter(prompt).strip().lower()
            if answer in _AFFIRMATIVE:
                return True
            if answer in _NEGATIVE:
                return False
            logger.debug("Unrecognized answer %r, asking again", answer)

    def present(self, change: PendingChange) -> None:
        """Display a pending change without asking anything."""
        self._presenter(change)

    def review(self, change: PendingChange) -> bool:
        """Display a pending change and ask the primary question.

        Declining means the whole run is cancelled.

        Args:
            change: The change about to be applied.

        Returns:
            True if the operator accepted the change.
        """
        self.present(change)
        return self.confirm(PRIMARY_QUESTION)
