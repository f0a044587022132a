"""
User Notifications

Short messages shown to the user after an action ("Expense saved!").
The planning services only know the abstract Notifier; the UI decides
how a message is displayed.
"""

from abc import ABC, abstractmethod

import structlog


class Notifier(ABC):
    """Receives user-facing messages."""

    @abstractmethod
    def success(self, message: str) -> None:
        pass

    @abstractmethod
    def error(self, message: str) -> None:
        pass


class LogNotifier(Notifier):
    """Notifier for headless use: messages go to the local log."""

    def __init__(self):
        self._logger = structlog.get_logger("cazen.notifications")

    def success(self, message: str) -> None:
        self._logger.info("notification", level="success", message=message)

    def error(self, message: str) -> None:
        self._logger.warning("notification", level="error", message=message)


class RecordingNotifier(Notifier):
    """Keeps every message in order. Useful in tests and previews."""

    def __init__(self):
        self.messages: list[tuple[str, str]] = []

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    @property
    def last(self) -> tuple[str, str]:
        return self.messages[-1]
