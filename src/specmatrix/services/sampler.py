"""Periodic hardware pollers publishing the latest snapshot."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Generic, TypeVar

from specmatrix.core.events import EventBus
from specmatrix.logging import get_logger

T = TypeVar("T")


class Sampler(Generic[T]):
    """Reads one value on a fixed cadence and publishes it on the bus.

    A failed read yields ``default()``; nothing is retried. Every sample
    replaces ``latest``. With ``publish_on_change`` the bus only hears about
    values that differ from the previous one. Without ``sample_on_start`` the
    first read happens on the worker thread, so ``start`` never waits on it.
    """

    def __init__(
        self,
        name: str,
        read: Callable[[], T],
        interval_s: float,
        default: Callable[[], T],
        events: EventBus,
        *,
        publish_on_change: bool = False,
        sample_on_start: bool = True,
        join_timeout_s: float = 2.0,
    ) -> None:
        if interval_s <= 0:
            raise ValueError(f"interval must be positive, got {interval_s}")
        self.name = name
        self.topic = f"snapshot.{name}"
        self.interval_s = interval_s
        self.events = events
        self.publish_on_change = publish_on_change
        self.sample_on_start = sample_on_start
        self.join_timeout_s = join_timeout_s
        self.logger = get_logger(f"sampler.{name}")
        self._read = read
        self._default = default
        self._latest: T = default()
        self._has_published = False
        self._lock = threading.RLock()
        self._thread: threading.Thread | None = None
        self._stop: threading.Event | None = None

    @property
    def latest(self) -> T:
        return self._latest

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self.logger.debug("Starting sampler every {:.2f}s", self.interval_s)
        self._stop = threading.Event()
        if self.sample_on_start:
            self.sample_once()
        self._thread = threading.Thread(
            target=self._loop, args=(self._stop,), name=f"sampler-{self.name}", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        if self._stop is None:
            return
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(self.join_timeout_s)
        self._thread = None
        self._stop = None
        self.logger.debug("Sampler stopped")

    def sample_once(self) -> T:
        try:
            value = self._read()
        except Exception as exc:
            self.logger.warning("Read failed, using default: {}", exc)
            value = self._default()
        self.publish(value)
        return value

    def publish(self, value: T) -> None:
        with self._lock:
            changed = not self._has_published or value != self._latest
            self._latest = value
            self._has_published = True
            if changed or not self.publish_on_change:
                self.events.emit(self.topic, value)

    def update(self, transform: Callable[[T], T | None]) -> T | None:
        """Publish ``transform(latest)`` atomically; ``None`` leaves ``latest`` alone."""
        with self._lock:
            value = transform(self._latest)
            if value is not None:
                self.publish(value)
            return value

    def _loop(self, stop: threading.Event) -> None:
        if not self.sample_on_start and not stop.is_set():
            self.sample_once()
        while not stop.wait(self.interval_s):
            self.sample_once()
