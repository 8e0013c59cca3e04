"""Shared sink for extension failures."""

from __future__ import annotations

from collections import deque
from typing import Optional

from mentionkit.domain.errors import ExtensionError
from mentionkit.domain.events import EventBus, ExtensionFailed
from mentionkit.logger import get_logger

logger = get_logger("extensions.reporting")


class ExtensionErrorReporter:
    """Logs, records and publishes :class:`ExtensionError` instances.

    The history is bounded; the oldest errors are dropped first.
    """

    def __init__(self, event_bus: Optional[EventBus] = None, history_limit: int = 50) -> None:
        self._event_bus = event_bus or EventBus()
        self.errors: deque[ExtensionError] = deque(maxlen=history_limit)

    def report(self, error: ExtensionError) -> None:
        logger.opt(exception=error.cause).warning(str(error))
        self.errors.append(error)
        self._event_bus.publish(ExtensionFailed(error=error))

    def clear(self) -> None:
        self.errors.clear()
