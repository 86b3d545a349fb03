"""Desktop notifications through the ``notify-send`` command."""
from __future__ import annotations

import logging
import shutil
import subprocess
from typing import Optional

from reporters.base import Notification


class DesktopNotifier:
    """Send notifications with ``notify-send`` when it is installed."""

    def __init__(
        self,
        command: str = "notify-send",
        timeout: float = 5.0,
        logger: Optional[logging.Logger] = None,
    ):
        self.command = command
        self.timeout = timeout
        self.logger = logger or logging.getLogger("jasmine_notifier")
        self._binary = shutil.which(command)
        if self._binary is None:
            self.logger.debug(f"{command} not found, notifications are logged only")

    @property
    def available(self) -> bool:
        return self._binary is not None

    @staticmethod
    def urgency_for(notification: Notification) -> str:
        if notification.priority >= 2:
            return "critical"
        if notification.priority < 0:
            return "low"
        return "normal"

    def build_command(self, notification: Notification) -> list[str]:
        icon = "dialog-error" if notification.image == "failed" else "dialog-information"
        return [
            self._binary or self.command,
            "--urgency", self.urgency_for(notification),
            "--icon", icon,
            notification.title,
            notification.message,
        ]

    def send(self, notification: Notification) -> None:
        """Send the notification; failures are logged, never raised."""
        if not self.available:
            self.logger.info(f"{notification.title}: {notification.message}")
            return
        try:
            subprocess.run(
                self.build_command(notification),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            self.logger.warning(f"Failed to send notification: {exc}")
