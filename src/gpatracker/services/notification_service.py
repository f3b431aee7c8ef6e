from enum import Enum
import logging
from typing import List, Tuple

logger = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class Notifier:
    def notify(self, message: str, kind: NotificationKind) -> None:
        raise NotImplementedError


class LogNotifier(Notifier):
    def notify(self, message: str, kind: NotificationKind) -> None:
        if kind is NotificationKind.ERROR:
            logger.error(message)
        else:
            logger.info(message)


class CollectingNotifier(Notifier):
    """Keeps notifications in memory so an API response can carry them back."""

    def __init__(self) -> None:
        self.messages: List[Tuple[str, NotificationKind]] = []

    def notify(self, message: str, kind: NotificationKind) -> None:
        self.messages.append((message, kind))
