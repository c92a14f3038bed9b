"""Screen monitor: geometry read once, brightness polled."""

from __future__ import annotations

import dataclasses
from datetime import datetime

from specmatrix.core.events import EventBus
from specmatrix.core.state import ScreenSnapshot
from specmatrix.logging import get_logger
from specmatrix.services import probes
from specmatrix.services.sampler import Sampler


class ScreenMonitor:
    def __init__(
        self,
        interval_s: float,
        events: EventBus,
        read_geometry=None,
        read_brightness=None,
        join_timeout_s: float = 2.0,
    ) -> None:
        self.logger = get_logger("screen")
        self._read_geometry = read_geometry or probes.read_screen_geometry
        self._read_brightness = read_brightness or probes.read_brightness
        self._geometry = ScreenSnapshot()
        self.sampler = Sampler(
            "screen",
            self._sample,
            interval_s,
            lambda: self._geometry,
            events,
            publish_on_change=True,
            join_timeout_s=join_timeout_s,
        )

    @property
    def latest(self) -> ScreenSnapshot:
        return self.sampler.latest

    def load_geometry(self) -> ScreenSnapshot:
        try:
            self._geometry = self._read_geometry()
        except Exception as exc:
            self.logger.warning("Screen geometry unavailable: {}", exc)
            self._geometry = ScreenSnapshot()
        return self._geometry

    def start(self) -> None:
        self.load_geometry()
        self.sampler.start()

    def stop(self) -> None:
        self.sampler.stop()

    def _sample(self) -> ScreenSnapshot:
        return dataclasses.replace(
            self._geometry, brightness=self._read_brightness(), sampled_at=datetime.now()
        )
