"""SpecMatrix application composition root."""

from __future__ import annotations

from dataclasses import dataclass

from specmatrix.config import SpecMatrixSettings
from specmatrix.core.catalog import DeviceSpec, lookup, model_identifier
from specmatrix.core.events import EventBus
from specmatrix.core.state import BatterySnapshot, MemorySnapshot, StorageSnapshot
from specmatrix.logging import get_logger
from specmatrix.services import probes
from specmatrix.services.network import NetworkMonitor
from specmatrix.services.sampler import Sampler
from specmatrix.services.screen import ScreenMonitor
from specmatrix.services.settings_store import SettingsStore


@dataclass(slots=True)
class SpecMatrixContext:
    settings: SpecMatrixSettings
    events: EventBus
    store: SettingsStore
    device: DeviceSpec
    battery: Sampler[BatterySnapshot]
    memory: Sampler[MemorySnapshot]
    storage: Sampler[StorageSnapshot]
    network: NetworkMonitor
    screen: ScreenMonitor

    def start(self) -> None:
        # screen geometry goes through Qt, keep it on the calling thread
        self.screen.start()
        self.battery.start()
        self.memory.start()
        self.storage.start()
        self.network.start()

    def stop(self) -> None:
        self.network.stop()
        self.storage.stop()
        self.memory.stop()
        self.battery.stop()
        self.screen.stop()

    def sample_all(self) -> None:
        """Take one reading of every metric without starting threads."""
        self.screen.load_geometry()
        self.screen.sampler.sample_once()
        self.battery.sample_once()
        self.memory.sample_once()
        self.storage.sample_once()
        self.network.path.sample_once()


def build_context(settings: SpecMatrixSettings, identifier: str | None = None) -> SpecMatrixContext:
    events = EventBus()
    store = SettingsStore(settings.paths.preferences_file, events, default_theme=settings.ui.theme)
    device = lookup(identifier if identifier is not None else model_identifier())
    intervals = settings.samplers
    timeout = intervals.join_timeout_s

    battery = Sampler("battery", probes.read_battery, intervals.battery_interval_s, BatterySnapshot, events, join_timeout_s=timeout)
    memory = Sampler("memory", probes.read_memory, intervals.memory_interval_s, MemorySnapshot, events, join_timeout_s=timeout)
    storage = Sampler("storage", probes.read_storage, intervals.storage_interval_s, StorageSnapshot, events, join_timeout_s=timeout)
    network = NetworkMonitor(intervals, settings.network, events)
    screen = ScreenMonitor(intervals.brightness_interval_s, events, join_timeout_s=timeout)

    logger = get_logger("bootstrap")
    logger.info("SpecMatrix context ready for {} ({})", device.model_name, device.identifier)
    if device.is_generic:
        logger.warning("Using generic device information for {}", device.identifier)

    return SpecMatrixContext(
        settings=settings,
        events=events,
        store=store,
        device=device,
        battery=battery,
        memory=memory,
        storage=storage,
        network=network,
        screen=screen,
    )
