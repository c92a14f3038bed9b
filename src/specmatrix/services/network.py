"""Network path monitor with an optional throughput probe."""

from __future__ import annotations

import dataclasses
import time

import requests

from specmatrix.config import NetworkSettings, SamplerSettings
from specmatrix.core.events import EventBus
from specmatrix.core.state import NetworkSnapshot
from specmatrix.logging import get_logger
from specmatrix.services import probes
from specmatrix.services.sampler import Sampler


def measure_speed(url: str, timeout_s: float, session: requests.Session | None = None) -> float:
    """Download ``url`` once and return the observed throughput in Mbps."""

    http = session or requests
    started = time.perf_counter()
    response = http.get(url, timeout=timeout_s)
    duration = time.perf_counter() - started
    if response.status_code != 200:
        raise requests.HTTPError(f"speed probe returned HTTP {response.status_code}")
    if duration <= 0:
        raise ValueError("speed probe finished in zero time")
    return (len(response.content) * 8) / duration / 1_000_000


class NetworkMonitor:
    """Publishes path changes on ``snapshot.network`` with the last measured speed."""

    def __init__(
        self,
        samplers: SamplerSettings,
        settings: NetworkSettings,
        events: EventBus,
        read_path=None,
        probe=None,
    ) -> None:
        self.settings = settings
        self.events = events
        self.logger = get_logger("network")
        self._read_path = read_path or probes.read_network
        self._probe = probe or self._default_probe
        self._session: requests.Session | None = None
        self._speed_mbps = 0.0
        self.path = Sampler(
            "network",
            self._sample_path,
            samplers.network_interval_s,
            NetworkSnapshot,
            events,
            publish_on_change=True,
            join_timeout_s=samplers.join_timeout_s,
        )
        self.speed: Sampler[float] | None = None
        if settings.measure_speed:
            self.speed = Sampler(
                "network_speed",
                self._sample_speed,
                settings.speed_interval_s,
                lambda: self._speed_mbps,
                events,
                sample_on_start=False,
                join_timeout_s=max(samplers.join_timeout_s, settings.request_timeout_s),
            )
            events.subscribe(self.speed.topic, self._on_speed)

    @property
    def latest(self) -> NetworkSnapshot:
        return self.path.latest

    def start(self) -> None:
        self.path.start()
        if self.speed is not None:
            self._session = requests.Session()
            self.speed.start()

    def stop(self) -> None:
        if self.speed is not None:
            self.speed.stop()
        self.path.stop()
        if self._session is not None:
            self._session.close()
            self._session = None

    def _sample_path(self) -> NetworkSnapshot:
        snapshot = self._read_path()
        if not snapshot.connected:
            self._speed_mbps = 0.0
            return snapshot
        return dataclasses.replace(snapshot, speed_mbps=self._speed_mbps)

    def _sample_speed(self) -> float:
        if not self.path.latest.connected:
            return 0.0
        return self._probe()

    def _default_probe(self) -> float:
        return measure_speed(self.settings.speed_url, self.settings.request_timeout_s, self._session)

    def _on_speed(self, mbps: float) -> None:
        def merge(current: NetworkSnapshot) -> NetworkSnapshot | None:
            # a disconnect published since the probe started wins
            if not current.connected or mbps == self._speed_mbps:
                return None
            self._speed_mbps = mbps
            return dataclasses.replace(current, speed_mbps=mbps)

        if self.path.update(merge) is not None:
            self.logger.debug("Measured {:.1f} Mbps", mbps)
