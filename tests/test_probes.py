from types import SimpleNamespace

import pytest

from specmatrix.core.state import BRIGHTNESS_UNKNOWN, BatteryState, NetworkKind
from specmatrix.services import probes


def _battery(percent, plugged):
    return SimpleNamespace(percent=percent, secsleft=-1, power_plugged=plugged)


def test_no_battery_reports_sentinel(monkeypatch):
    monkeypatch.setattr(probes.psutil, "sensors_battery", lambda: None)
    snapshot = probes.read_battery()
    assert snapshot.level == -1.0
    assert snapshot.state == BatteryState.UNKNOWN


@pytest.mark.parametrize(
    ("percent", "plugged", "level", "state"),
    [
        (55, False, 0.55, BatteryState.UNPLUGGED),
        (80, True, 0.80, BatteryState.CHARGING),
        (100, True, 1.0, BatteryState.FULL),
        (130, False, 1.0, BatteryState.UNPLUGGED),
        (-5, False, 1.0, BatteryState.UNPLUGGED),
        (40, None, 0.40, BatteryState.UNKNOWN),
    ],
)
def test_battery_levels_are_normalised(monkeypatch, percent, plugged, level, state):
    monkeypatch.setattr(probes.psutil, "sensors_battery", lambda: _battery(percent, plugged))
    snapshot = probes.read_battery()
    assert snapshot.level == pytest.approx(level)
    assert snapshot.state == state
    assert 0.0 <= snapshot.level <= 1.0


def test_memory_used_is_total_minus_available(monkeypatch):
    monkeypatch.setattr(probes.psutil, "virtual_memory", lambda: SimpleNamespace(total=8000, available=3000))
    snapshot = probes.read_memory()
    assert snapshot.total_bytes == 8000
    assert snapshot.used_bytes == 5000


def test_memory_estimate_when_counters_missing(monkeypatch):
    monkeypatch.setattr(probes.psutil, "virtual_memory", lambda: SimpleNamespace(total=8000))
    assert probes.read_memory().used_bytes == 2000


def test_storage_rejects_invalid_values(monkeypatch, tmp_path):
    monkeypatch.setattr(probes.psutil, "disk_usage", lambda _path: SimpleNamespace(total=0, used=0, free=0))
    assert probes.read_storage(tmp_path).total_bytes == 0
    monkeypatch.setattr(probes.psutil, "disk_usage", lambda _path: SimpleNamespace(total=100, used=0, free=150))
    assert probes.read_storage(tmp_path).used_bytes == 0
    monkeypatch.setattr(probes.psutil, "disk_usage", lambda _path: SimpleNamespace(total=100, used=60, free=40))
    snapshot = probes.read_storage(tmp_path)
    assert (snapshot.total_bytes, snapshot.used_bytes, snapshot.free_bytes) == (100, 60, 40)


@pytest.mark.parametrize(
    ("name", "kind"),
    [
        ("wlan0", NetworkKind.WIFI),
        ("wlp3s0", NetworkKind.WIFI),
        ("rmnet_data0", NetworkKind.CELLULAR),
        ("eth0", NetworkKind.WIRED),
        ("enp0s31f6", NetworkKind.WIRED),
        ("tun0", NetworkKind.UNKNOWN),
    ],
)
def test_classify_interface(name, kind):
    assert probes.classify_interface(name) == kind


def test_network_prefers_wifi_and_ignores_loopback(monkeypatch):
    stats = {
        "lo": SimpleNamespace(isup=True),
        "eth0": SimpleNamespace(isup=True),
        "wlan0": SimpleNamespace(isup=True),
        "docker0": SimpleNamespace(isup=True),
    }
    monkeypatch.setattr(probes.psutil, "net_if_stats", lambda: stats)
    snapshot = probes.read_network()
    assert snapshot.connected is True
    assert snapshot.kind == NetworkKind.WIFI
    assert snapshot.interface == "wlan0"


def test_network_cellular_carries_cellular_info(monkeypatch):
    monkeypatch.setattr(probes.psutil, "net_if_stats", lambda: {"rmnet0": SimpleNamespace(isup=True)})
    snapshot = probes.read_network()
    assert snapshot.kind == NetworkKind.CELLULAR
    assert snapshot.cellular is not None


def test_network_disconnected_when_only_loopback_is_up(monkeypatch):
    stats = {"lo": SimpleNamespace(isup=True), "eth0": SimpleNamespace(isup=False)}
    monkeypatch.setattr(probes.psutil, "net_if_stats", lambda: stats)
    snapshot = probes.read_network()
    assert snapshot.connected is False
    assert snapshot.kind == NetworkKind.UNKNOWN


def test_brightness_from_backlight(tmp_path):
    device = tmp_path / "intel_backlight"
    device.mkdir()
    (device / "brightness").write_text("300\n")
    (device / "max_brightness").write_text("1200\n")
    assert probes.read_brightness(tmp_path) == pytest.approx(0.25)


def test_brightness_sentinel_without_backlight(tmp_path):
    assert probes.read_brightness(tmp_path / "absent") == BRIGHTNESS_UNKNOWN
    broken = tmp_path / "acpi_video0"
    broken.mkdir()
    (broken / "brightness").write_text("garbage")
    (broken / "max_brightness").write_text("10")
    assert probes.read_brightness(tmp_path) == BRIGHTNESS_UNKNOWN


def test_cpu_counts_are_positive():
    total, active = probes.cpu_counts()
    assert total >= 1
    assert 1 <= active <= max(total, active)
