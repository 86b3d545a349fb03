"""Console reporter writing run progress through ``logging``."""
from __future__ import annotations

import logging
from typing import Optional

from reporters.base import LineReporter, Notification, ReportLevel
from reporters.notifier import DesktopNotifier


class ConsoleReporter(LineReporter):
    """Write leveled lines to a logger and forward notifications."""

    LEVELS = {
        ReportLevel.INFO: logging.INFO,
        ReportLevel.SUCCESS: logging.INFO,
        ReportLevel.SUITE: logging.INFO,
        ReportLevel.FAILURE: logging.ERROR,
        ReportLevel.ERROR: logging.ERROR,
    }

    def __init__(
        self,
        notifier: Optional[DesktopNotifier] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.notifier = notifier
        self.logger = logger or logging.getLogger("jasmine_runner")

    def line(self, level: ReportLevel, message: str) -> None:
        # Multi-line messages keep the level prefix on every line
        for text in message.splitlines() or [""]:
            self.logger.log(self.LEVELS[level], text)

    def notify(self, notification: Notification) -> None:
        if self.notifier is None:
            self.logger.debug(f"Notification ({notification.title}): {notification.message}")
            return
        self.notifier.send(notification)
