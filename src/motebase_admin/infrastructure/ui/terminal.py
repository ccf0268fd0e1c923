"""Terminal implementations of the operator interaction capabilities."""

import click

from motebase_admin.domain.services.interaction import ConfirmationProvider, Notifier

_LEVEL_COLORS = {
    "error": "red",
    "warning": "yellow",
    "success": "green",
    "info": None,
}


class ClickConfirmation(ConfirmationProvider):
    """Asks yes/no questions on the terminal.

    Args:
        assume_yes: Answer every question with yes (for --yes flags).
    """

    def __init__(self, assume_yes: bool = False) -> None:
        self.assume_yes = assume_yes

    def confirm(self, message: str) -> bool:
        if self.assume_yes:
            return True
        return click.confirm(message, default=False)


class ClickNotifier(Notifier):
    """Prints notifications to stderr, coloured by level."""

    def notify(self, message: str, level: str = "info") -> None:
        click.secho(message, fg=_LEVEL_COLORS.get(level), err=True)
