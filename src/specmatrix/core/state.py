"""Immutable hardware snapshot records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

BATTERY_LEVEL_UNKNOWN = -1.0
BRIGHTNESS_UNKNOWN = -1.0


def clamp_unit(value: float | None, sentinel: float) -> float:
    """Clamp ``value`` into [0, 1]; missing or NaN values become ``sentinel``."""
    if value is None or value != value:
        return sentinel
    return min(max(float(value), 0.0), 1.0)


class BatteryState(str, Enum):
    CHARGING = "charging"
    FULL = "full"
    UNPLUGGED = "unplugged"
    UNKNOWN = "unknown"


class NetworkKind(str, Enum):
    WIFI = "wifi"
    CELLULAR = "cellular"
    WIRED = "wired"
    UNKNOWN = "unknown"


_BATTERY_DESCRIPTIONS = {
    BatteryState.CHARGING: "Charging",
    BatteryState.FULL: "Fully Charged",
    BatteryState.UNPLUGGED: "Battery",
    BatteryState.UNKNOWN: "Unknown",
}


@dataclass(frozen=True, slots=True)
class BatterySnapshot:
    level: float = BATTERY_LEVEL_UNKNOWN
    state: BatteryState = BatteryState.UNKNOWN
    sampled_at: datetime = field(default_factory=datetime.now, compare=False)

    def __post_init__(self) -> None:
        if self.level != BATTERY_LEVEL_UNKNOWN:
            object.__setattr__(self, "level", clamp_unit(self.level, BATTERY_LEVEL_UNKNOWN))

    @property
    def is_known(self) -> bool:
        return self.level != BATTERY_LEVEL_UNKNOWN

    @property
    def percent(self) -> int | None:
        return round(self.level * 100) if self.is_known else None

    @property
    def state_description(self) -> str:
        return _BATTERY_DESCRIPTIONS[self.state]

    @property
    def severity(self) -> str:
        """Gauge colour band: charging, ok, fair, low or critical."""
        if self.state in (BatteryState.CHARGING, BatteryState.FULL):
            return "charging"
        if not self.is_known:
            return "ok"
        if self.level <= 0.1:
            return "critical"
        if self.level <= 0.2:
            return "low"
        if self.level <= 0.5:
            return "fair"
        return "ok"


@dataclass(frozen=True, slots=True)
class MemorySnapshot:
    total_bytes: int = 0
    used_bytes: int = 0
    sampled_at: datetime = field(default_factory=datetime.now, compare=False)

    @property
    def usage_percentage(self) -> float:
        if self.total_bytes <= 0:
            return 0.0
        return self.used_bytes / self.total_bytes * 100

    @property
    def is_high(self) -> bool:
        return self.usage_percentage > 80


@dataclass(frozen=True, slots=True)
class StorageSnapshot:
    total_bytes: int = 0
    used_bytes: int = 0
    free_bytes: int = 0
    sampled_at: datetime = field(default_factory=datetime.now, compare=False)

    @property
    def usage_percentage(self) -> float:
        if self.total_bytes <= 0:
            return 0.0
        return self.used_bytes / self.total_bytes * 100

    @property
    def level(self) -> str:
        usage = self.usage_percentage
        if usage > 90:
            return "critical"
        if usage > 75:
            return "warning"
        return "ok"


@dataclass(frozen=True, slots=True)
class CellularInfo:
    carrier: str = "Cellular"
    technology: str = "Cellular"
    radio_tech: str | None = None

    @property
    def display_technology(self) -> str:
        if "5G" in self.technology:
            return "5G"
        if "LTE" in self.technology:
            return "4G"
        if "3G" in self.technology:
            return "3G"
        return self.technology


@dataclass(frozen=True, slots=True)
class NetworkSnapshot:
    connected: bool = False
    kind: NetworkKind = NetworkKind.UNKNOWN
    interface: str | None = None
    cellular: CellularInfo | None = None
    speed_mbps: float = 0.0
    sampled_at: datetime = field(default_factory=datetime.now, compare=False)

    @property
    def status_description(self) -> str:
        return "Connected" if self.connected else "Disconnected"

    @property
    def kind_label(self) -> str:
        return {
            NetworkKind.WIFI: "WiFi",
            NetworkKind.CELLULAR: "Cellular",
            NetworkKind.WIRED: "Ethernet",
        }.get(self.kind, "Unknown")

    @property
    def speed_description(self) -> str:
        if not self.connected:
            return "Not Connected"
        if self.speed_mbps == 0:
            return "Measuring..."
        return f"{self.speed_mbps:.1f} Mbps"


@dataclass(frozen=True, slots=True)
class ScreenSnapshot:
    width: float = 0.0
    height: float = 0.0
    scale: float = 1.0
    native_scale: float = 1.0
    brightness: float = BRIGHTNESS_UNKNOWN
    refresh_rate: float = 0.0
    sampled_at: datetime = field(default_factory=datetime.now, compare=False)

    def __post_init__(self) -> None:
        if self.brightness != BRIGHTNESS_UNKNOWN:
            object.__setattr__(self, "brightness", clamp_unit(self.brightness, BRIGHTNESS_UNKNOWN))

    @property
    def resolution(self) -> str:
        return f"{int(self.width * self.scale)} × {int(self.height * self.scale)}"

    @property
    def brightness_percent(self) -> int | None:
        if self.brightness == BRIGHTNESS_UNKNOWN:
            return None
        return round(self.brightness * 100)
