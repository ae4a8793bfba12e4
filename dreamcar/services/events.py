"""Synchronous publish/subscribe for build-state notifications."""

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

from dreamcar.core.enums import BuildEvent

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]


class EventBus:
    """Delivers each emitted event to its subscribers in subscription order."""

    def __init__(self) -> None:
        self._handlers: dict[BuildEvent, list[Handler]] = defaultdict(list)

    def subscribe(self, event: BuildEvent, handler: Handler) -> Callable[[], None]:
        """Register ``handler`` and return a callable that removes it again."""
        self._handlers[event].append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers[event]:
                self._handlers[event].remove(handler)

        return unsubscribe

    def emit(self, event: BuildEvent, payload: Any = None) -> None:
        # Copy so handlers may unsubscribe while being notified
        for handler in list(self._handlers[event]):
            handler(payload)
        logger.debug("Emitted %s to %d handler(s)", event.value, len(self._handlers[event]))
