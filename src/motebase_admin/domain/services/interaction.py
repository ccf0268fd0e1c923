"""Operator interaction capabilities used by the console core.

The core never talks to a UI toolkit directly. It asks yes/no questions
through a ConfirmationProvider and reports transient outcomes through a
Notifier; front ends supply concrete implementations.
"""

from abc import ABC, abstractmethod

from motebase_admin.core.logging import get_logger

logger = get_logger(__name__)


class ConfirmationProvider(ABC):
    """Asks the operator to confirm an action."""

    @abstractmethod
    def confirm(self, message: str) -> bool:
        """Return True when the operator accepts."""
        ...


class Notifier(ABC):
    """Surfaces transient notifications to the operator."""

    @abstractmethod
    def notify(self, message: str, level: str = "info") -> None:
        """Show a message. Level is one of info, success, warning, error."""
        ...

    def error(self, message: str) -> None:
        self.notify(message, "error")

    def success(self, message: str) -> None:
        self.notify(message, "success")


class LoggingNotifier(Notifier):
    """Notifier that only writes to the structured log."""

    def notify(self, message: str, level: str = "info") -> None:
        if level == "error":
            logger.error(message)
        elif level == "warning":
            logger.warning(message)
        else:
            logger.info(message, level=level)


class StaticConfirmation(ConfirmationProvider):
    """Answers every question the same way (non-interactive runs)."""

    def __init__(self, answer: bool) -> None:
        self.answer = answer

    def confirm(self, message: str) -> bool:
        logger.debug("Auto-answered confirmation", prompt=message, answer=self.answer)
        return self.answer
