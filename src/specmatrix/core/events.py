"""Thread-safe pub/sub bus that remembers the latest payload per topic."""

from __future__ import annotations

import threading
from collections import defaultdict
from collections.abc import Callable
from typing import Any

from specmatrix.logging import get_logger

EventHandler = Callable[[Any], None]

_MISSING = object()


class EventBus:
    """Minimal event bus supporting background sampler threads."""

    def __init__(self) -> None:
        self._subscribers: defaultdict[str, list[EventHandler]] = defaultdict(list)
        self._latest: dict[str, Any] = {}
        self._lock = threading.RLock()
        self.logger = get_logger("events")

    def subscribe(self, topic: str, handler: EventHandler, replay: bool = False) -> None:
        with self._lock:
            if handler not in self._subscribers[topic]:
                self._subscribers[topic].append(handler)
            payload = self._latest.get(topic, _MISSING)
        if replay and payload is not _MISSING:
            self._deliver(topic, handler, payload)

    def unsubscribe(self, topic: str, handler: EventHandler) -> None:
        with self._lock:
            if handler in self._subscribers[topic]:
                self._subscribers[topic].remove(handler)

    def emit(self, topic: str, payload: Any) -> None:
        with self._lock:
            self._latest[topic] = payload
            handlers = list(self._subscribers.get(topic, ()))
        for handler in handlers:
            self._deliver(topic, handler, payload)

    def latest(self, topic: str, default: Any = None) -> Any:
        with self._lock:
            return self._latest.get(topic, default)

    def _deliver(self, topic: str, handler: EventHandler, payload: Any) -> None:
        try:
            handler(payload)
        except Exception as exc:
            self.logger.error("Handler for {} failed: {}", topic, exc)
