"""
Bus d'événements applicatif (ex: demande d'ouverture du panneau admin).
"""
import logging
from collections import defaultdict
from enum import Enum
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

Handler = Callable[[], None]


class AppEvent(str, Enum):
    OPEN_ADMIN_PANEL = "openAdminPanel"


class EventBus:
    def __init__(self):
        self._handlers: Dict[AppEvent, List[Handler]] = defaultdict(list)

    def subscribe(self, event: AppEvent, handler: Handler) -> Callable[[], None]:
        """Abonne `handler` à `event`; retourne la fonction de désabonnement."""
        if not isinstance(event, AppEvent):
            raise TypeError(f"Unknown event: {event!r}")
        self._handlers[event].append(handler)

        def unsubscribe():
            if handler in self._handlers[event]:
                self._handlers[event].remove(handler)

        return unsubscribe

    def publish(self, event: AppEvent) -> None:
        if not isinstance(event, AppEvent):
            raise TypeError(f"Unknown event: {event!r}")
        handlers = list(self._handlers[event])
        logger.debug("Publishing %s to %d handler(s)", event.value, len(handlers))
        for handler in handlers:
            handler()
