"""Notifier that writes reminders to the application log."""

import logging
from dataclasses import dataclass

from feed_tracker.services.reminders import Notifier

_logger = logging.getLogger(__name__)


@dataclass
class LogNotifier(Notifier):
    """Emits reminder notifications as log records."""

    def notify(self, title: str, body: str) -> None:
        """Log the notification at warning level so it stands out."""
        _logger.warning("%s %s", title, body)
