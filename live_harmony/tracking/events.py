"""Event emitter - topic to listener-list registry."""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class EventEmitter:
    """Minimal observer registry.

    Listeners are called synchronously in registration order. A failing
    listener is logged and skipped; it never stops delivery to the rest.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    def on(self, topic: str, listener: Listener) -> Listener:
        """Register a listener for a topic and return it."""
        self._listeners[topic].append(listener)
        return listener

    def off(self, topic: str, listener: Listener) -> bool:
        """Unregister a listener. Returns False if it was not registered."""
        listeners = self._listeners.get(topic)
        if not listeners or listener not in listeners:
            return False
        listeners.remove(listener)
        return True

    def remove_all_listeners(self, topic: Optional[str] = None) -> None:
        """Remove all listeners for a topic, or for every topic."""
        if topic is None:
            self._listeners.clear()
        else:
            self._listeners.pop(topic, None)

    def emit(self, topic: str, payload: Any = None) -> int:
        """
        Notify every listener of a topic.

        Args:
            topic: Topic name (e.g., "note-on")
            payload: Object passed to each listener

        Returns:
            Number of listeners that were called
        """
        called = 0
        # Copy so listeners may unsubscribe while being notified
        for listener in list(self._listeners.get(topic, ())):
            called += 1
            try:
                listener(payload)
            except Exception:
                logger.exception("Listener %r failed on '%s'", listener, topic)
        return called
