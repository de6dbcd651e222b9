from __future__ import annotations

import logging
from typing import Callable

from contact_wizard.domain.entities.notification import Notification, Severity


class NotificationChannel:
    """Single transient, severity-coded channel: a new notification replaces the visible one."""

    def __init__(self, listener: Callable[[Notification], None] | None = None, history_limit: int = 20) -> None:
        self._listener = listener
        self._current: Notification | None = None
        self._history: list[Notification] = []
        self._history_limit = history_limit
        self._logger = logging.getLogger(__name__)

    @property
    def current(self) -> Notification | None:
        return self._current

    @property
    def history(self) -> list[Notification]:
        return list(self._history)

    def publish(self, severity: Severity, message: str) -> Notification:
        notification = Notification(severity=severity, message=message)
        self._current = notification
        self._history.append(notification)
        if len(self._history) > self._history_limit:
            self._history = self._history[-self._history_limit :]
        if self._listener is not None:
            try:
                self._listener(notification)
            except Exception as e:
                self._logger.warning("Notification listener failed", extra={"reason": str(e)})
        return notification

    def dismiss(self) -> None:
        self._current = None
