"""Thin readers around OS hardware counters.

Each reader returns one snapshot record. Readers may raise; the sampler
that drives them substitutes its default on failure.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import psutil

from specmatrix.core.state import (
    BRIGHTNESS_UNKNOWN,
    BatterySnapshot,
    BatteryState,
    CellularInfo,
    MemorySnapshot,
    NetworkKind,
    NetworkSnapshot,
    ScreenSnapshot,
    StorageSnapshot,
)

BACKLIGHT_ROOT = Path("/sys/class/backlight")

_IGNORED_INTERFACES = ("lo", "docker", "veth", "br-", "virbr", "vmnet", "utun", "awdl", "llw")
_WIFI_PREFIXES = ("wlan", "wlp", "wl", "wifi", "ath", "wi-fi", "wireless")
_CELLULAR_PREFIXES = ("wwan", "rmnet", "ccmni", "pdp_ip", "cellular", "mobile")
_WIRED_PREFIXES = ("eth", "enp", "eno", "ens", "en", "ethernet")
_KIND_PRIORITY = (NetworkKind.WIFI, NetworkKind.CELLULAR, NetworkKind.WIRED, NetworkKind.UNKNOWN)


def read_battery() -> BatterySnapshot:
    battery = psutil.sensors_battery()
    if battery is None:
        return BatterySnapshot()

    percent = battery.percent
    if battery.power_plugged is None:
        state = BatteryState.UNKNOWN
    elif battery.power_plugged:
        state = BatteryState.FULL if percent is not None and percent >= 100 else BatteryState.CHARGING
    else:
        state = BatteryState.UNPLUGGED

    if percent is None or percent < 0:
        # invalid level from the OS; show a full gauge like the platform UI does
        return BatterySnapshot(level=1.0, state=state)
    return BatterySnapshot(level=percent / 100.0, state=state)


def read_memory() -> MemorySnapshot:
    vm = psutil.virtual_memory()
    total = int(vm.total)
    available = getattr(vm, "available", None)
    if available is None or available > total:
        # rough estimate when the detailed counters are missing
        return MemorySnapshot(total_bytes=total, used_bytes=total // 4)
    return MemorySnapshot(total_bytes=total, used_bytes=total - int(available))


def read_storage(path: Path | None = None) -> StorageSnapshot:
    usage = psutil.disk_usage(str(path or Path.home()))
    total, free = int(usage.total), int(usage.free)
    used = total - free
    if total <= 0 or free < 0 or used < 0:
        return StorageSnapshot()
    return StorageSnapshot(total_bytes=total, used_bytes=used, free_bytes=free)


def classify_interface(name: str) -> NetworkKind:
    lowered = name.lower()
    if lowered.startswith(_WIFI_PREFIXES):
        return NetworkKind.WIFI
    if lowered.startswith(_CELLULAR_PREFIXES):
        return NetworkKind.CELLULAR
    if lowered.startswith(_WIRED_PREFIXES):
        return NetworkKind.WIRED
    return NetworkKind.UNKNOWN


def read_network() -> NetworkSnapshot:
    stats = psutil.net_if_stats()
    active = sorted(
        name
        for name, info in stats.items()
        if info.isup and not name.lower().startswith(_IGNORED_INTERFACES)
    )
    if not active:
        return NetworkSnapshot(connected=False)

    by_kind = {kind: [n for n in active if classify_interface(n) == kind] for kind in _KIND_PRIORITY}
    kind = next(k for k in _KIND_PRIORITY if by_kind[k])
    interface = by_kind[kind][0]
    cellular = CellularInfo() if kind == NetworkKind.CELLULAR else None
    return NetworkSnapshot(connected=True, kind=kind, interface=interface, cellular=cellular)


def read_brightness(root: Path = BACKLIGHT_ROOT) -> float:
    """Return the first backlight's brightness as a 0..1 fraction."""
    if not root.is_dir():
        return BRIGHTNESS_UNKNOWN
    for device in sorted(root.iterdir()):
        try:
            current = int((device / "brightness").read_text().strip())
            maximum = int((device / "max_brightness").read_text().strip())
        except (OSError, ValueError):
            continue
        if maximum > 0:
            return current / maximum
    return BRIGHTNESS_UNKNOWN


_qt_app = None


def read_screen_geometry() -> ScreenSnapshot:
    """Read the primary screen's geometry through Qt. Call from the main thread."""
    global _qt_app
    if sys.platform.startswith("linux") and not (
        os.getenv("DISPLAY") or os.getenv("WAYLAND_DISPLAY")
    ):
        os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

    from PySide6 import QtGui

    app = QtGui.QGuiApplication.instance()
    if app is None:
        _qt_app = app = QtGui.QGuiApplication([sys.argv[0] if sys.argv else "specmatrix"])

    screen = app.primaryScreen()
    if screen is None:
        return ScreenSnapshot()
    size = screen.size()
    ratio = float(screen.devicePixelRatio())
    return ScreenSnapshot(
        width=float(size.width()),
        height=float(size.height()),
        scale=ratio,
        native_scale=ratio,
        refresh_rate=float(screen.refreshRate()),
    )


def cpu_counts() -> tuple[int, int]:
    """Return ``(total, active)`` logical core counts."""
    total = psutil.cpu_count(logical=True) or os.cpu_count() or 0
    try:
        active = len(os.sched_getaffinity(0))
    except (AttributeError, OSError):
        active = total
    return total, active
