"""Desktop notifications through the system tray icon."""

from __future__ import annotations

import logging

from PyQt6.QtWidgets import QSystemTrayIcon


logger = logging.getLogger(__name__)

NOTIFICATION_TIMEOUT_MS = 10_000


def _messages_supported() -> bool:
    return QSystemTrayIcon.supportsMessages()


class TrayNotifier:
    """Shows notifications as tray-icon balloons (Notification Center on macOS).

    Fire-and-forget: nothing is reported back to the caller.
    """

    def __init__(self, tray_icon: QSystemTrayIcon, *, enabled: bool = True) -> None:
        self._tray_icon = tray_icon
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def notify(self, title: str, body: str) -> None:
        if not self._enabled:
            return
        if not _messages_supported():
            logger.info("Notifications unsupported here: %s: %s", title, body)
            return
        self._tray_icon.showMessage(
            title,
            body,
            QSystemTrayIcon.MessageIcon.Information,
            NOTIFICATION_TIMEOUT_MS,
        )
