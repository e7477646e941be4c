"""Toast notifications shown to the user on the next page render."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from clientdesk.schemas.notification import Notification, Severity

logger = logging.getLogger(__name__)


class NotificationSink(ABC):
    @abstractmethod
    def notify(self, notification: Notification) -> None: ...


class ToastQueue(NotificationSink):
    """Holds pending toasts until the page drains them."""

    def __init__(self) -> None:
        self._pending: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        logger.debug("Toast queued: %s - %s", notification.title, notification.message)
        self._pending.append(notification)

    def drain(self) -> list[Notification]:
        pending, self._pending = self._pending, []
        return pending

    def __len__(self) -> int:
        return len(self._pending)


def success(message: str) -> Notification:
    return Notification(title="Succès", message=message)


def error(message: str) -> Notification:
    return Notification(title="Erreur", message=message, severity=Severity.DESTRUCTIVE)
